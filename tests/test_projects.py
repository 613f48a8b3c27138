from datetime import datetime

from conftest import auth_headers

from sewn.models import Proposal


def test_create_project_defaults_to_open(client, make_user):
    user = make_user("client")
    response = client.post(
        "/projects",
        json={
            "title": "Knit sweater samples",
            "description": "Five colourways",
            "categories": ["knit_specialist"],
            "budget_min": 500000,
            "budget_max": 800000,
        },
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["client"]["id"] == user.id
    assert body["proposal_count"] == 0


def test_create_project_as_draft(client, make_user):
    user = make_user("both")
    response = client.post(
        "/projects",
        json={"title": "Draft", "description": "Later", "status": "draft"},
        headers=auth_headers(user),
    )
    assert response.json()["status"] == "draft"


def test_expert_only_account_cannot_post_projects(client, make_user):
    user = make_user("expert")
    response = client.post(
        "/projects", json={"title": "x", "description": "y"}, headers=auth_headers(user)
    )
    assert response.status_code == 403


def test_inverted_budget_is_rejected(client, make_user):
    user = make_user("client")
    response = client.post(
        "/projects",
        json={"title": "x", "description": "y", "budget_min": 10, "budget_max": 5},
        headers=auth_headers(user),
    )
    assert response.status_code == 422


def test_list_defaults_to_open_newest_first(client, make_user, make_project):
    owner = make_user("client")
    older = make_project(owner, created_at=datetime(2026, 1, 1))
    newer = make_project(owner, created_at=datetime(2026, 3, 1))
    make_project(owner, status="draft")

    response = client.get("/projects")

    assert [p["id"] for p in response.json()["data"]] == [newer.id, older.id]


def test_list_filters(client, make_user, make_project):
    owner = make_user("client")
    match = make_project(
        owner,
        title="Denim jacket pattern",
        categories=["pattern_maker", "cad_specialist"],
        budget_min=300000,
        budget_max=600000,
    )
    make_project(owner, title="Denim shoot", categories=["photographer"], budget_min=300000, budget_max=600000)
    make_project(owner, title="Denim jacket", categories=["pattern_maker"], budget_min=100000, budget_max=900000)

    response = client.get(
        "/projects",
        params={
            "categories": "pattern_maker",
            "minBudget": 200000,
            "maxBudget": 700000,
            "search": "DENIM",
        },
    )

    assert [p["id"] for p in response.json()["data"]] == [match.id]


def test_list_by_status(client, make_user, make_project):
    owner = make_user("client")
    done = make_project(owner, status="completed")
    make_project(owner)

    response = client.get("/projects", params={"status": "completed"})

    assert [p["id"] for p in response.json()["data"]] == [done.id]


def test_search_finds_title_with_special_characters(client, make_user):
    user = make_user("client")
    client.post(
        "/projects",
        json={"title": "Tops & skirts", "description": "Summer line"},
        headers=auth_headers(user),
    )

    response = client.get("/projects", params={"search": "tops & skirts"})

    assert [p["title"] for p in response.json()["data"]] == ["Tops &amp; skirts"]


def test_project_detail_with_proposals(client, make_user, make_project, make_expert, db_session):
    owner = make_user("client")
    project = make_project(owner)
    first, second = make_expert(rating_avg=4.5), make_expert()
    db_session.add_all(
        [
            Proposal(project_id=project.id, expert_id=first.id, cover_letter="a", proposed_rate=1,
                     created_at=datetime(2026, 1, 1)),
            Proposal(project_id=project.id, expert_id=second.id, cover_letter="b", proposed_rate=2,
                     created_at=datetime(2026, 2, 1)),
        ]
    )
    db_session.commit()

    response = client.get(f"/projects/{project.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["project"]["proposal_count"] == 2
    assert body["project"]["client"]["name"] == owner.name
    assert [p["expert"]["id"] for p in body["proposals"]] == [second.id, first.id]
    assert body["proposals"][1]["expert"]["rating_avg"] == 4.5


def test_my_projects(client, make_user, make_project):
    owner = make_user("client")
    mine = make_project(owner, status="draft")
    make_project(make_user("client"))

    response = client.get("/projects/mine", headers=auth_headers(owner))

    assert [p["id"] for p in response.json()] == [mine.id]


def test_owner_publishes_draft(client, make_user, make_project):
    owner = make_user("client")
    project = make_project(owner, status="draft")

    response = client.patch(
        f"/projects/{project.id}",
        json={"status": "open", "title": "Published"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "open"
    assert response.json()["title"] == "Published"


def test_owner_cannot_complete_project_directly(client, make_user, make_project):
    owner = make_user("client")
    project = make_project(owner)

    response = client.patch(
        f"/projects/{project.id}", json={"status": "completed"}, headers=auth_headers(owner)
    )

    assert response.status_code == 400


def test_non_owner_cannot_edit(client, make_user, make_project):
    project = make_project(make_user("client"))
    response = client.patch(
        f"/projects/{project.id}", json={"title": "mine now"}, headers=auth_headers(make_user())
    )
    assert response.status_code == 403

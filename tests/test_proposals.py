from datetime import datetime

from conftest import auth_headers

from sewn.models import Contract, Notification, Project, Proposal


def _submit(client, expert, project, **overrides):
    payload = {"cover_letter": "Ten years of pattern work", "proposed_rate": 700000}
    payload.update(overrides)
    return client.post(
        f"/projects/{project.id}/proposals", json=payload, headers=auth_headers(expert.user)
    )


def test_submit_proposal_notifies_owner(client, make_user, make_project, make_expert, db_session):
    owner = make_user("client")
    project = make_project(owner, title="Linen shirt")
    expert = make_expert()

    response = _submit(client, expert, project, estimated_duration="2주")

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    notification = db_session.query(Notification).filter(Notification.user_id == owner.id).one()
    assert notification.type == "proposal_received"
    assert notification.link == f"/projects/{project.id}"
    assert "₩700,000" in notification.content


def test_submit_requires_expert_profile(client, make_user, make_project):
    project = make_project(make_user("client"))
    user = make_user("expert")

    response = client.post(
        f"/projects/{project.id}/proposals",
        json={"cover_letter": "hi", "proposed_rate": 1000},
        headers=auth_headers(user),
    )

    assert response.status_code == 400


def test_submit_to_closed_project(client, make_user, make_project, make_expert):
    project = make_project(make_user("client"), status="draft")
    assert _submit(client, make_expert(), project).status_code == 400


def test_duplicate_proposal_conflicts(client, make_user, make_project, make_expert):
    project = make_project(make_user("client"))
    expert = make_expert()

    assert _submit(client, expert, project).status_code == 201
    assert _submit(client, expert, project).status_code == 409


def test_rate_must_be_positive(client, make_user, make_project, make_expert):
    project = make_project(make_user("client"))
    assert _submit(client, make_expert(), project, proposed_rate=0).status_code == 422


def test_accept_creates_contract(client, make_user, make_project, make_expert, db_session):
    owner = make_user("client")
    deadline = datetime(2026, 12, 31)
    project = make_project(owner, deadline=deadline)
    expert = make_expert()
    proposal_id = _submit(client, expert, project).json()["id"]

    response = client.post(f"/proposals/{proposal_id}/accept", headers=auth_headers(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["proposal"]["status"] == "accepted"

    db_session.expire_all()
    contract = db_session.query(Contract).filter(Contract.id == body["contractId"]).one()
    assert contract.status == "pending_payment"
    assert contract.agreed_amount == 700000
    assert contract.client_id == owner.id
    assert contract.expert_id == expert.user_id
    assert contract.proposal_id == proposal_id
    assert contract.deadline == deadline
    assert contract.platform_fee == 70000
    assert contract.expert_amount == 630000
    assert db_session.get(Project, project.id).status == "in_progress"

    notification = (
        db_session.query(Notification).filter(Notification.user_id == expert.user_id).one()
    )
    assert notification.type == "proposal_accepted"
    assert notification.related_id == contract.id


def test_only_owner_can_accept(client, make_user, make_project, make_expert):
    project = make_project(make_user("client"))
    proposal_id = _submit(client, make_expert(), project).json()["id"]

    response = client.post(f"/proposals/{proposal_id}/accept", headers=auth_headers(make_user()))

    assert response.status_code == 403


def test_cannot_accept_twice(client, make_user, make_project, make_expert):
    owner = make_user("client")
    project = make_project(owner)
    proposal_id = _submit(client, make_expert(), project).json()["id"]

    client.post(f"/proposals/{proposal_id}/accept", headers=auth_headers(owner))
    response = client.post(f"/proposals/{proposal_id}/accept", headers=auth_headers(owner))

    assert response.status_code == 400


def test_reject_notifies_expert(client, make_user, make_project, make_expert, db_session):
    owner = make_user("client")
    project = make_project(owner)
    expert = make_expert()
    proposal_id = _submit(client, expert, project).json()["id"]

    response = client.post(f"/proposals/{proposal_id}/reject", headers=auth_headers(owner))

    assert response.json()["status"] == "rejected"
    notification = (
        db_session.query(Notification).filter(Notification.user_id == expert.user_id).one()
    )
    assert notification.type == "proposal_rejected"


def test_withdraw_by_proposing_expert(client, make_user, make_project, make_expert):
    project = make_project(make_user("client"))
    expert = make_expert()
    proposal_id = _submit(client, expert, project).json()["id"]

    other = client.post(f"/proposals/{proposal_id}/withdraw", headers=auth_headers(make_expert().user))
    assert other.status_code == 403

    response = client.post(f"/proposals/{proposal_id}/withdraw", headers=auth_headers(expert.user))
    assert response.json()["status"] == "withdrawn"


def test_my_proposals_include_project(client, make_user, make_project, make_expert, db_session):
    project = make_project(make_user("client"), title="Tailored coat")
    expert = make_expert()
    db_session.add(
        Proposal(project_id=project.id, expert_id=expert.id, cover_letter="c", proposed_rate=5)
    )
    db_session.commit()

    response = client.get("/proposals/mine", headers=auth_headers(expert.user))

    assert [p["project"]["title"] for p in response.json()] == ["Tailored coat"]


def test_my_proposals_without_profile_is_empty(client, make_user):
    response = client.get("/proposals/mine", headers=auth_headers(make_user("client")))
    assert response.json() == []

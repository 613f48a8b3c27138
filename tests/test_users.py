from conftest import auth_headers

from sewn.models import ExpertProfile


def test_update_profile(client, make_user):
    user = make_user()
    response = client.patch(
        "/users/me",
        json={"name": "  Park  ", "phone": "010-1234-5678"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Park"
    assert response.json()["phone"] == "010-1234-5678"


def test_onboarding_as_expert_creates_empty_profile(client, make_user, db_session):
    user = make_user("client")
    response = client.post(
        "/users/me/onboarding",
        json={"user_type": "both", "name": "Lee"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["user_type"] == "both"
    profile = db_session.query(ExpertProfile).filter(ExpertProfile.user_id == user.id).one()
    assert profile.categories == []
    assert profile.availability == "available"


def test_onboarding_as_client_creates_no_profile(client, make_user, db_session):
    user = make_user("client")
    client.post(
        "/users/me/onboarding",
        json={"user_type": "client", "name": "Kim"},
        headers=auth_headers(user),
    )
    assert db_session.query(ExpertProfile).count() == 0


def test_onboarding_rejects_unknown_type(client, make_user):
    user = make_user()
    response = client.post(
        "/users/me/onboarding",
        json={"user_type": "admin", "name": "Kim"},
        headers=auth_headers(user),
    )
    assert response.status_code == 422

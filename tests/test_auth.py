from conftest import auth_headers, make_token
from jose import jwt

from sewn.models import User


def test_missing_authorization_header_is_rejected(client):
    response = client.get("/users/me")
    assert response.status_code in (401, 403)


def test_malformed_token_is_rejected(client):
    response = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert "Invalid token format" in response.json()["detail"]


def test_expired_token_sets_header(client, make_user):
    user = make_user()
    token = make_token(user.id, user.email, expires_in=-60)

    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.headers["X-Token-Expired"] == "true"


def test_token_signed_with_other_secret_is_rejected(client):
    token = jwt.encode(
        {"sub": "abc", "aud": "authenticated", "exp": 9999999999}, "wrong", algorithm="HS256"
    )
    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_wrong_audience_is_rejected(client):
    token = make_token("abc", aud="anon")
    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_first_request_creates_local_user(client, db_session):
    token = make_token(
        "new-user-id",
        "new@example.com",
        user_metadata={"name": "김민지", "user_type": "expert"},
        email_confirmed_at="2026-01-01T00:00:00Z",
    )

    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "new-user-id"
    assert body["name"] == "김민지"
    assert body["user_type"] == "expert"
    assert body["is_verified"] is True
    assert db_session.query(User).filter(User.id == "new-user-id").count() == 1


def test_unknown_user_type_defaults_to_client(client):
    token = make_token("someone", user_metadata={"user_type": "admin"})
    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.json()["user_type"] == "client"


def test_email_taken_by_other_account_conflicts(client, make_user):
    existing = make_user()
    token = make_token("different-id", existing.email)

    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 409


def test_deactivated_user_is_forbidden(client, make_user):
    user = make_user(is_active=False)
    response = client.get("/users/me", headers=auth_headers(user))
    assert response.status_code == 403

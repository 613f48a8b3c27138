import pytest
from conftest import auth_headers

from sewn.domain.notifications import create_notification
from sewn.models import Notification


def test_list_returns_latest_with_unread_count(client, make_user, db_session):
    user = make_user()
    for i in range(55):
        create_notification(db_session, user.id, "message", f"Message {i}")
    db_session.query(Notification).filter(Notification.title == "Message 0").update({"is_read": True})
    db_session.commit()

    response = client.get("/notifications", headers=auth_headers(user))

    body = response.json()
    assert len(body["notifications"]) == 50
    assert body["unreadCount"] == 54


def test_notifications_are_private(client, make_user, db_session):
    owner, other = make_user(), make_user()
    notification = create_notification(db_session, owner.id, "project_update", "Paid")

    assert client.get("/notifications", headers=auth_headers(other)).json()["notifications"] == []
    assert client.post(f"/notifications/{notification.id}/read", headers=auth_headers(other)).status_code == 404
    assert client.delete(f"/notifications/{notification.id}", headers=auth_headers(other)).status_code == 404


def test_mark_read_and_read_all(client, make_user, db_session):
    user = make_user()
    first = create_notification(db_session, user.id, "message", "one")
    create_notification(db_session, user.id, "message", "two")
    headers = auth_headers(user)

    response = client.post(f"/notifications/{first.id}/read", headers=headers)
    assert response.json()["is_read"] is True

    response = client.post("/notifications/read-all", headers=headers)
    assert response.json()["updated"] == 1
    assert client.get("/notifications", headers=headers).json()["unreadCount"] == 0


def test_delete_notification(client, make_user, db_session):
    user = make_user()
    notification = create_notification(db_session, user.id, "message", "bye")

    response = client.delete(f"/notifications/{notification.id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert db_session.query(Notification).count() == 0


def test_unknown_notification_type(db_session, make_user):
    user = make_user()
    with pytest.raises(ValueError):
        create_notification(db_session, user.id, "promotion", "Sale")

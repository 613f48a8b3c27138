from datetime import datetime

from conftest import auth_headers

from sewn.models import Conversation, Message, Notification


def _start(client, user, *others, project_id=None):
    return client.post(
        "/conversations",
        json={"participant_ids": [o.id for o in others], "project_id": project_id},
        headers=auth_headers(user),
    )


def test_start_conversation_includes_caller(client, make_user):
    alice, bob = make_user("client"), make_user("expert")

    response = _start(client, alice, bob)

    assert response.status_code == 200
    body = response.json()
    assert set(body["participant_ids"]) == {alice.id, bob.id}
    assert {p["id"] for p in body["participants"]} == {alice.id, bob.id}
    assert body["last_message"] is None


def test_start_conversation_reuses_same_participants(client, make_user, db_session):
    alice, bob = make_user("client"), make_user("expert")

    first = _start(client, alice, bob).json()
    second = _start(client, bob, alice).json()

    assert first["id"] == second["id"]
    assert db_session.query(Conversation).count() == 1


def test_start_conversation_with_unknown_user(client, make_user):
    alice = make_user()
    response = client.post(
        "/conversations", json={"participant_ids": ["ghost"]}, headers=auth_headers(alice)
    )
    assert response.status_code == 404


def test_start_conversation_with_only_self(client, make_user):
    alice = make_user()
    response = client.post(
        "/conversations", json={"participant_ids": [alice.id]}, headers=auth_headers(alice)
    )
    assert response.status_code == 400


def test_send_message_updates_conversation_and_notifies(client, make_user, db_session):
    alice, bob = make_user("client"), make_user("expert")
    conversation_id = _start(client, alice, bob).json()["id"]
    long_text = "가" * 80

    response = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"content": f"  {long_text}  "},
        headers=auth_headers(alice),
    )

    assert response.status_code == 201
    assert response.json()["content"] == long_text
    assert response.json()["message_type"] == "text"

    db_session.expire_all()
    conversation = db_session.get(Conversation, conversation_id)
    assert conversation.last_message_at is not None
    assert conversation.last_message_preview == "가" * 50 + "..."

    [notification] = db_session.query(Notification).all()
    assert notification.user_id == bob.id
    assert notification.type == "message"
    assert notification.related_id == conversation_id


def test_empty_text_message_is_rejected(client, make_user):
    alice, bob = make_user(), make_user()
    conversation_id = _start(client, alice, bob).json()["id"]

    response = client.post(
        f"/conversations/{conversation_id}/messages", json={"content": "   "}, headers=auth_headers(alice)
    )

    assert response.status_code == 400


def test_file_message_without_text(client, make_user, db_session):
    alice, bob = make_user(), make_user()
    conversation_id = _start(client, alice, bob).json()["id"]

    response = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"message_type": "file", "file_url": "https://cdn/x.pdf", "file_name": "techpack.pdf"},
        headers=auth_headers(alice),
    )

    assert response.status_code == 201
    db_session.expire_all()
    assert db_session.get(Conversation, conversation_id).last_message_preview == "techpack.pdf"


def test_outsider_cannot_read_or_send(client, make_user):
    alice, bob, eve = make_user(), make_user(), make_user()
    conversation_id = _start(client, alice, bob).json()["id"]

    assert client.get(f"/conversations/{conversation_id}/messages", headers=auth_headers(eve)).status_code == 403
    assert (
        client.post(
            f"/conversations/{conversation_id}/messages", json={"content": "hi"}, headers=auth_headers(eve)
        ).status_code
        == 403
    )


def test_reading_messages_marks_others_read(client, make_user, db_session):
    alice, bob = make_user(), make_user()
    conversation = Conversation(participant_ids=[alice.id, bob.id])
    db_session.add(conversation)
    db_session.flush()
    db_session.add_all(
        [
            Message(conversation_id=conversation.id, sender_id=bob.id, content="first",
                    created_at=datetime(2026, 1, 1, 9)),
            Message(conversation_id=conversation.id, sender_id=alice.id, content="second",
                    created_at=datetime(2026, 1, 1, 10)),
        ]
    )
    db_session.commit()

    response = client.get(f"/conversations/{conversation.id}/messages", headers=auth_headers(alice))

    assert [m["content"] for m in response.json()] == ["first", "second"]
    db_session.expire_all()
    read_state = {m.content: m.is_read for m in db_session.query(Message)}
    assert read_state == {"first": True, "second": False}


def test_list_conversations_order_and_unread(client, make_user, db_session):
    alice, bob, carol = make_user(), make_user(), make_user()
    quiet = Conversation(participant_ids=[alice.id, carol.id], created_at=datetime(2026, 5, 1))
    old = Conversation(participant_ids=[alice.id, bob.id], last_message_at=datetime(2026, 1, 1))
    recent = Conversation(participant_ids=[alice.id, bob.id, carol.id], last_message_at=datetime(2026, 2, 1))
    db_session.add_all([quiet, old, recent])
    db_session.flush()
    db_session.add_all(
        [
            Message(conversation_id=recent.id, sender_id=bob.id, content="unread 1"),
            Message(conversation_id=recent.id, sender_id=carol.id, content="unread 2"),
            Message(conversation_id=recent.id, sender_id=alice.id, content="mine"),
        ]
    )
    db_session.commit()

    response = client.get("/conversations", headers=auth_headers(alice))

    body = response.json()
    assert [c["id"] for c in body] == [recent.id, old.id, quiet.id]
    assert body[0]["unread_count"] == 2
    assert body[2]["last_message"] is None


def test_conversations_of_others_are_hidden(client, make_user, db_session):
    alice, bob, carol = make_user(), make_user(), make_user()
    db_session.add(Conversation(participant_ids=[bob.id, carol.id]))
    db_session.commit()

    assert client.get("/conversations", headers=auth_headers(alice)).json() == []


def test_image_message_with_attachments_only(client, make_user, db_session):
    alice, bob = make_user(), make_user()
    conversation_id = _start(client, alice, bob).json()["id"]

    response = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"message_type": "image", "attachment_urls": ["https://cdn/a.png"]},
        headers=auth_headers(alice),
    )

    assert response.status_code == 201
    assert response.json()["attachment_urls"] == ["https://cdn/a.png"]
    assert response.json()["file_url"] is None


def test_preview_matches_stored_content(client, make_user, db_session):
    alice, bob = make_user(), make_user()
    conversation_id = _start(client, alice, bob).json()["id"]

    response = client.post(
        f"/conversations/{conversation_id}/messages",
        json={"content": "<b>CLO3D</b> & patterns"},
        headers=auth_headers(alice),
    )

    stored = response.json()["content"]
    assert stored == "&lt;b&gt;CLO3D&lt;/b&gt; &amp; patterns"
    db_session.expire_all()
    assert db_session.get(Conversation, conversation_id).last_message_preview == stored


def test_list_conversations_shows_latest_message(client, make_user, db_session):
    alice, bob = make_user(), make_user()
    conversation = Conversation(participant_ids=[alice.id, bob.id], last_message_at=datetime(2026, 3, 2))
    db_session.add(conversation)
    db_session.flush()
    db_session.add_all(
        [
            Message(conversation_id=conversation.id, sender_id=bob.id, content="later",
                    created_at=datetime(2026, 3, 2)),
            Message(conversation_id=conversation.id, sender_id=bob.id, content="earlier",
                    created_at=datetime(2026, 3, 1), is_read=True),
        ]
    )
    db_session.commit()

    [summary] = client.get("/conversations", headers=auth_headers(alice)).json()

    assert summary["last_message"]["content"] == "later"
    assert summary["unread_count"] == 1

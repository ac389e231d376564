from datetime import timedelta

from app.constants.statuses import NotificationType
from app.models import Message, Notification
from tests.conftest import NOW, auth_headers, make_session, make_user


def _post(client, user, session_id, content):
    return client.post(f"/chat/{session_id}/messages", json={"content": content}, headers=auth_headers(user))


def test_participants_exchange_messages(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(days=1))

    first = _post(client, customer, session.id, "Hi, looking forward to it")
    second = _post(client, provider, session.id, "Same here!")

    assert first.status_code == 201
    assert first.json()["isRead"] is False
    assert second.status_code == 201

    messages = client.get(f"/chat/{session.id}/messages", headers=auth_headers(provider)).json()
    assert [m["content"] for m in messages] == ["Hi, looking forward to it", "Same here!"]
    assert [m["senderId"] for m in messages] == [customer.id, provider.id]


def test_message_notifies_other_participant(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(days=1))

    _post(client, customer, session.id, "Can we start 5 minutes late?")

    notification = db.query(Notification).filter(Notification.user_id == provider.id).one()
    assert notification.type == NotificationType.NEW_MESSAGE.value
    assert notification.data["sessionId"] == session.id


def test_outsider_cannot_read_or_post(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(days=1))
    outsider = make_user(db, "outsider@example.com")

    assert client.get(f"/chat/{session.id}/messages", headers=auth_headers(outsider)).status_code == 403
    assert _post(client, outsider, session.id, "hello").status_code == 403
    assert db.query(Message).count() == 0


def test_unknown_session_chat_returns_404(client, customer):
    assert client.get("/chat/999/messages", headers=auth_headers(customer)).status_code == 404
    assert _post(client, customer, 999, "hello").status_code == 404


def test_blank_message_rejected(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(days=1))
    assert _post(client, customer, session.id, "   ").status_code == 400


def test_mark_read_only_touches_received_messages(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(days=1))
    _post(client, customer, session.id, "one")
    _post(client, customer, session.id, "two")
    _post(client, provider, session.id, "reply")

    response = client.patch(f"/chat/{session.id}/messages/read", headers=auth_headers(provider))

    assert response.json() == {"updated": 2}
    messages = client.get(f"/chat/{session.id}/messages", headers=auth_headers(customer)).json()
    assert [m["isRead"] for m in messages] == [True, True, False]

from datetime import datetime, timedelta

from app.constants.statuses import AppSessionStatus, TransactionType, UserRole
from app.models import BookingRequest, MinuteUsage, Wallet, WalletTransaction
from tests.conftest import NOW, auth_headers, make_service, make_session, make_user, make_wallet


def _reschedule(client, user, session_id, new_start):
    return client.post(
        f"/sessions/{session_id}/reschedule",
        json={"newStartTime": new_start.isoformat()},
        headers=auth_headers(user),
    )


def _set_status(client, user, session_id, status):
    return client.patch(f"/sessions/{session_id}/status", json={"status": status}, headers=auth_headers(user))


# ---------------------------------------------------------------------------
# Reschedule
# ---------------------------------------------------------------------------


def test_reschedule_preserves_duration(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=2), minutes=45)
    new_start = datetime(2024, 1, 12, 9, 0)

    response = _reschedule(client, customer, session.id, new_start)

    assert response.status_code == 200
    body = response.json()
    assert body["startTime"] == "2024-01-12T09:00:00"
    assert body["endTime"] == "2024-01-12T09:45:00"
    assert body["durationMinutes"] == 45
    assert body["status"] == "SCHEDULED"


def test_reschedule_within_cutoff_rejected(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(minutes=10))

    response = _reschedule(client, provider, session.id, NOW + timedelta(days=1))

    assert response.status_code == 400
    assert "15 minutes" in response.json()["detail"]


def test_reschedule_exactly_at_cutoff_rejected(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(minutes=15))
    assert _reschedule(client, customer, session.id, NOW + timedelta(days=1)).status_code == 400


def test_reschedule_just_outside_cutoff_allowed(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(minutes=16))
    assert _reschedule(client, customer, session.id, NOW + timedelta(days=1)).status_code == 200


def test_reschedule_open_ended_session_keeps_no_end(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=3), minutes=None)

    body = _reschedule(client, customer, session.id, NOW + timedelta(days=2)).json()

    assert body["endTime"] is None


def test_reschedule_by_outsider_forbidden(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=2))
    outsider = make_user(db, "outsider@example.com")
    assert _reschedule(client, outsider, session.id, NOW + timedelta(days=1)).status_code == 403


def test_reschedule_completed_session_conflicts(client, db, customer, provider):
    session = make_session(
        db, customer, provider, NOW + timedelta(hours=2), status=AppSessionStatus.COMPLETED
    )
    assert _reschedule(client, customer, session.id, NOW + timedelta(days=1)).status_code == 409


def test_reschedule_unknown_session(client, customer):
    assert _reschedule(client, customer, 999, NOW + timedelta(days=1)).status_code == 404


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


def test_list_sessions_for_participants(client, db, customer, provider):
    make_session(db, customer, provider, datetime(2024, 1, 15, 9, 0))
    make_session(db, customer, provider, datetime(2024, 1, 16, 9, 0), status=AppSessionStatus.COMPLETED)

    response = client.get("/sessions", headers=auth_headers(customer))
    assert response.status_code == 200
    assert [s["startTime"] for s in response.json()] == ["2024-01-16T09:00:00", "2024-01-15T09:00:00"]

    completed = client.get("/sessions", params={"status": "COMPLETED"}, headers=auth_headers(provider)).json()
    assert len(completed) == 1

    paged = client.get("/sessions", params={"limit": 1, "offset": 1}, headers=auth_headers(customer)).json()
    assert paged[0]["startTime"] == "2024-01-15T09:00:00"


def test_get_session_detail_restricted(client, db, customer, provider):
    session = make_session(db, customer, provider, datetime(2024, 1, 15, 9, 0))
    outsider = make_user(db, "outsider@example.com")

    assert client.get(f"/sessions/{session.id}", headers=auth_headers(provider)).status_code == 200
    assert client.get(f"/sessions/{session.id}", headers=auth_headers(outsider)).status_code == 403


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


def test_provider_runs_session_to_completion_and_settles(client, db, customer, provider):
    make_wallet(db, customer, minutes=100)
    session = make_session(db, customer, provider, datetime(2024, 1, 10, 11, 30), minutes=30, price=75.0)

    assert _set_status(client, provider, session.id, "ACTIVE").json()["status"] == "ACTIVE"
    response = _set_status(client, provider, session.id, "COMPLETED")

    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"

    db.expire_all()
    provider_wallet = db.query(Wallet).filter(Wallet.user_id == provider.id).one()
    assert provider_wallet.balance == 75.0
    earning = db.query(WalletTransaction).filter(WalletTransaction.wallet_id == provider_wallet.id).one()
    assert earning.type == TransactionType.EARNING.value
    assert earning.amount == 75.0

    client_wallet = db.query(Wallet).filter(Wallet.user_id == customer.id).one()
    assert client_wallet.available_minutes == 70
    usage = db.query(MinuteUsage).filter(MinuteUsage.session_id == session.id).one()
    assert usage.minutes_used == 30


def test_completion_floors_client_minutes_at_zero(client, db, customer, provider):
    make_wallet(db, customer, minutes=10)
    session = make_session(db, customer, provider, NOW, minutes=60, status=AppSessionStatus.ACTIVE)

    _set_status(client, provider, session.id, "COMPLETED")

    db.expire_all()
    assert db.query(Wallet).filter(Wallet.user_id == customer.id).one().available_minutes == 0


def test_scheduled_session_cannot_jump_to_completed(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=1))
    assert _set_status(client, provider, session.id, "COMPLETED").status_code == 409


def test_client_may_only_cancel_scheduled(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=1))

    assert _set_status(client, customer, session.id, "ACTIVE").status_code == 409
    assert _set_status(client, customer, session.id, "CANCELLED").json()["status"] == "CANCELLED"
    assert _set_status(client, customer, session.id, "CANCELLED").status_code == 409


def test_status_change_forbidden_for_outsiders(client, db, customer, provider):
    session = make_session(db, customer, provider, NOW + timedelta(hours=1))
    admin_user = make_user(db, "root@example.com", UserRole.ADMIN)
    assert _set_status(client, admin_user, session.id, "CANCELLED").status_code == 403


def test_reschedule_moves_accepted_booking_with_session(client, db, customer, provider):
    service = make_service(db, provider)
    booking = client.post(
        "/bookings",
        json={"serviceId": service.id, "date": "2024-01-15T10:00:00"},
        headers=auth_headers(customer),
    ).json()
    accepted = client.post(
        f"/bookings/{booking['id']}/respond", json={"status": "accepted"}, headers=auth_headers(provider)
    ).json()

    response = _reschedule(client, customer, accepted["booking"]["sessionId"], datetime(2024, 1, 15, 14, 0))
    assert response.status_code == 200

    db.expire_all()
    assert db.query(BookingRequest).filter(BookingRequest.id == booking["id"]).one().requested_time == datetime(
        2024, 1, 15, 14, 0
    )
    slots = client.get(
        f"/providers/{provider.id}/availability",
        params={"date": "2024-01-15", "days": 1},
        headers=auth_headers(customer),
    ).json()["availability"][0]["slots"]
    assert "10:00" in slots
    assert "14:00" not in slots

from datetime import datetime

import pytest

from app.constants.statuses import AppSessionStatus
from app.models import Review
from tests.conftest import auth_headers, make_session, make_user


def _review(client, user, session_id, rating=5, **extra):
    return client.post(
        "/reviews", json={"sessionId": session_id, "rating": rating, **extra}, headers=auth_headers(user)
    )


@pytest.fixture
def completed_session(db, customer, provider):
    return make_session(
        db, customer, provider, datetime(2024, 1, 8, 10, 0), status=AppSessionStatus.COMPLETED
    )


def test_client_reviews_completed_session(client, db, customer, completed_session):
    response = _review(client, customer, completed_session.id, rating=4, comment="Very helpful")

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"id", "createdAt"}
    review = db.query(Review).filter(Review.id == body["id"]).one()
    assert review.rating == 4
    assert review.comment == "Very helpful"
    assert review.provider_id == completed_session.provider_id


def test_second_review_conflicts(client, db, customer, completed_session):
    assert _review(client, customer, completed_session.id).status_code == 201

    response = _review(client, customer, completed_session.id, rating=1)

    assert response.status_code == 409
    assert response.json()["detail"] == "This session has already been reviewed"
    assert db.query(Review).count() == 1


@pytest.mark.parametrize("status", [AppSessionStatus.SCHEDULED, AppSessionStatus.ACTIVE, AppSessionStatus.CANCELLED])
@pytest.mark.parametrize("rating", [1, 5])
def test_only_completed_sessions_can_be_reviewed(client, db, customer, provider, status, rating):
    session = make_session(db, customer, provider, datetime(2024, 1, 8, 10, 0), status=status)

    response = _review(client, customer, session.id, rating=rating)

    assert response.status_code == 400
    assert response.json()["detail"] == "Only completed sessions can be reviewed"


def test_provider_cannot_review_own_session(client, provider, completed_session):
    assert _review(client, provider, completed_session.id).status_code == 403


def test_ownership_checked_before_status(client, db, customer, provider):
    session = make_session(db, customer, provider, datetime(2024, 1, 8, 10, 0))
    outsider = make_user(db, "outsider@example.com")
    assert _review(client, outsider, session.id).status_code == 403


def test_unknown_session_returns_404(client, customer):
    assert _review(client, customer, 777).status_code == 404


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_rating_out_of_range_rejected(client, customer, completed_session, rating):
    assert _review(client, customer, completed_session.id, rating=rating).status_code == 400


def test_provider_reviews_summary(client, db, customer, provider, completed_session):
    second = make_session(db, customer, provider, datetime(2024, 1, 9, 10, 0), status=AppSessionStatus.COMPLETED)
    _review(client, customer, completed_session.id, rating=5)
    _review(client, customer, second.id, rating=4)

    response = client.get(f"/providers/{provider.id}/reviews", headers=auth_headers(customer))

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["averageRating"] == 4.5
    assert {r["rating"] for r in body["reviews"]} == {4, 5}


def test_provider_without_reviews(client, customer, provider):
    body = client.get(f"/providers/{provider.id}/reviews", headers=auth_headers(customer)).json()
    assert body["count"] == 0
    assert body["averageRating"] is None

from app.constants.statuses import KycStatus, NotificationType
from app.models import Notification
from tests.conftest import NOW, auth_headers

DOCUMENTS = {
    "idFront": "https://cdn.example.com/kyc/front.jpg",
    "idBack": "https://cdn.example.com/kyc/back.jpg",
    "selfie": "https://cdn.example.com/kyc/selfie.jpg",
}


def test_get_and_update_profile(client, customer):
    headers = auth_headers(customer)

    me = client.get("/users/me", headers=headers).json()
    assert me["email"] == "client@example.com"
    assert me["role"] == "CLIENT"

    updated = client.patch(
        "/users/me", json={"name": "Casey C.", "image": "https://cdn.example.com/a.png"}, headers=headers
    ).json()
    assert updated["name"] == "Casey C."
    assert updated["image"] == "https://cdn.example.com/a.png"


def test_profile_image_must_be_url(client, customer):
    response = client.patch("/users/me", json={"image": "not a url"}, headers=auth_headers(customer))
    assert response.status_code == 400


def test_kyc_submission(client, provider):
    headers = auth_headers(provider)

    response = client.post("/kyc/submit", json=DOCUMENTS, headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == KycStatus.SUBMITTED.value
    assert response.json()["kycSubmittedAt"] == NOW.isoformat()
    assert client.get("/kyc/status", headers=headers).json()["status"] == "SUBMITTED"


def test_kyc_rejects_non_http_urls(client, provider):
    response = client.post(
        "/kyc/submit", json={**DOCUMENTS, "selfie": "ftp://files.example.com/selfie.jpg"}, headers=auth_headers(provider)
    )
    assert response.status_code == 400


def test_admin_verifies_kyc(client, db, provider, admin):
    client.post("/kyc/submit", json=DOCUMENTS, headers=auth_headers(provider))

    response = client.post(
        f"/admin/kyc/{provider.id}/review", json={"status": "VERIFIED"}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "VERIFIED"
    assert response.json()["kycVerifiedAt"] is not None
    notification = db.query(Notification).filter(Notification.user_id == provider.id).one()
    assert notification.type == NotificationType.KYC_UPDATE.value


def test_admin_rejects_kyc_with_reason(client, provider, admin):
    client.post("/kyc/submit", json=DOCUMENTS, headers=auth_headers(provider))

    body = client.post(
        f"/admin/kyc/{provider.id}/review",
        json={"status": "REJECTED", "reason": "Blurry photo"},
        headers=auth_headers(admin),
    ).json()

    assert body["status"] == "REJECTED"
    assert body["kycRejectionReason"] == "Blurry photo"


def test_kyc_review_requires_pending_submission(client, provider, admin):
    response = client.post(
        f"/admin/kyc/{provider.id}/review", json={"status": "VERIFIED"}, headers=auth_headers(admin)
    )
    assert response.status_code == 409


def test_kyc_review_admin_only(client, provider):
    response = client.post(
        f"/admin/kyc/{provider.id}/review", json={"status": "VERIFIED"}, headers=auth_headers(provider)
    )
    assert response.status_code == 403

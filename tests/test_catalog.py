from app.constants.statuses import UserRole
from tests.conftest import auth_headers, make_service, make_user

NEW_SERVICE = {
    "title": "Mock interview",
    "description": "45 minute technical interview practice",
    "price": 80.0,
    "duration": 45,
    "category": "Careers",
}


def test_provider_creates_and_lists_services(client, provider):
    response = client.post("/services", json=NEW_SERVICE, headers=auth_headers(provider))

    assert response.status_code == 201
    created = response.json()
    assert created["providerId"] == provider.id
    assert created["isActive"] is True

    listed = client.get("/services", headers=auth_headers(provider)).json()
    assert [s["id"] for s in listed] == [created["id"]]


def test_clients_cannot_manage_services(client, customer):
    assert client.post("/services", json=NEW_SERVICE, headers=auth_headers(customer)).status_code == 403
    assert client.get("/services", headers=auth_headers(customer)).status_code == 403


def test_service_validation(client, provider):
    headers = auth_headers(provider)
    assert client.post("/services", json={**NEW_SERVICE, "price": 0}, headers=headers).status_code == 400
    assert client.post("/services", json={**NEW_SERVICE, "duration": -5}, headers=headers).status_code == 400
    assert client.post("/services", json={**NEW_SERVICE, "title": "  "}, headers=headers).status_code == 400


def test_get_service_includes_provider(client, customer, provider, service):
    body = client.get(f"/services/{service.id}", headers=auth_headers(customer)).json()
    assert body["provider"]["id"] == provider.id
    assert body["provider"]["name"] == "Pat Provider"


def test_update_restricted_to_owner(client, db, provider, service):
    rival = make_user(db, "rival@example.com", UserRole.PROVIDER)

    assert client.patch(f"/services/{service.id}", json={"price": 10}, headers=auth_headers(rival)).status_code == 403

    response = client.patch(
        f"/services/{service.id}", json={"price": 120.0, "title": "Coaching+"}, headers=auth_headers(provider)
    )
    assert response.status_code == 200
    assert response.json()["price"] == 120.0
    assert response.json()["title"] == "Coaching+"
    assert response.json()["duration"] == 60


def test_delete_deactivates(client, db, provider):
    service = make_service(db, provider)

    response = client.delete(f"/services/{service.id}", headers=auth_headers(provider))

    assert response.status_code == 200
    body = client.get(f"/services/{service.id}", headers=auth_headers(provider)).json()
    assert body["isActive"] is False


def test_unknown_service_returns_404(client, provider):
    assert client.get("/services/31337", headers=auth_headers(provider)).status_code == 404

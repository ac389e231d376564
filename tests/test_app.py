from datetime import timedelta

from app.config import SESSION_COOKIE_NAME
from app.security_utils import create_jwt_token, mask_sensitive_data, verify_jwt_token
from tests.conftest import auth_headers


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert "running" in client.get("/").json()["message"]


def test_security_headers_present(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "default-src 'none'" in response.headers["Content-Security-Policy"]


def test_missing_token_is_401(client):
    assert client.get("/users/me").status_code == 401


def test_malformed_and_forged_tokens_are_401(client, customer):
    assert client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401

    forged = create_jwt_token({"sub": str(customer.id)}) + "tampered"
    assert client.get("/users/me", headers={"Authorization": f"Bearer {forged}"}).status_code == 401


def test_expired_token_is_401(client, customer):
    token = create_jwt_token({"sub": str(customer.id)}, expires_delta=timedelta(minutes=-5))
    assert client.get("/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_token_for_deleted_user_is_401(client):
    token = create_jwt_token({"sub": "404"})
    assert client.get("/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_session_cookie_authenticates(client, customer):
    token = create_jwt_token({"sub": str(customer.id)})
    client.cookies.set(SESSION_COOKIE_NAME, token)
    try:
        assert client.get("/users/me").json()["id"] == customer.id
    finally:
        client.cookies.clear()


def test_bearer_token_round_trip(customer):
    headers = auth_headers(customer)
    payload = verify_jwt_token(headers["Authorization"].split(" ", 1)[1])
    assert payload["sub"] == str(customer.id)


def test_mask_sensitive_data():
    assert mask_sensitive_data("0012345678") == "******5678"
    assert mask_sensitive_data("abc") == "***"
    assert mask_sensitive_data("") == ""

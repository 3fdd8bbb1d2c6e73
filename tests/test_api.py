from __future__ import annotations

from fastapi.testclient import TestClient

from identity_service.config import Settings
from identity_service.main import create_app

REGISTRATION = {"username": "juanperez", "email": "juan@test.com", "password": "miPassword123"}


def _register(client, **overrides):
    return client.post("/auth/register", json={**REGISTRATION, **overrides})


def _login(client, email="juan@test.com", password="miPassword123"):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_register_returns_public_account(api_client):
    client, _ = api_client

    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"]
    assert body["user"]["id"] == 1
    assert body["user"]["username"] == "juanperez"
    assert body["user"]["is_active"] is True
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]


def test_register_conflicts(api_client):
    client, _ = api_client
    _register(client)

    email_clash = _register(client, username="another")
    assert email_clash.status_code == 409
    assert email_clash.json()["detail"]["error"] == "duplicate_email"

    username_clash = _register(client, email="other@test.com")
    assert username_clash.status_code == 409
    assert username_clash.json()["detail"]["error"] == "duplicate_username"


def test_register_rejects_invalid_payload(api_client):
    client, engine = api_client

    response = _register(client, username="ab", password="123")

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "validation_failed"
    assert {violation["field"] for violation in detail["violations"]} == {"username", "password"}
    assert engine.list_accounts() == []


def test_register_requires_all_fields(api_client):
    client, _ = api_client
    response = client.post("/auth/register", json={"username": "juanperez"})
    assert response.status_code == 422


def test_login_and_profile(api_client):
    client, _ = api_client
    _register(client)

    response = _login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"]
    assert body["user"]["username"] == "juanperez"
    assert "password_hash" not in body["user"]

    profile = client.get(
        "/auth/profile", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert profile.status_code == 200
    assert profile.json()["email"] == "juan@test.com"
    assert "password_hash" not in profile.json()


def test_login_failures_are_indistinguishable(api_client):
    client, _ = api_client
    _register(client)

    wrong_password = _login(client, password="wrong")
    unknown_email = _login(client, email="nobody@test.com")

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.content == unknown_email.content


def test_login_rejects_disabled_account(api_client):
    client, engine = api_client
    user_id = _register(client).json()["user"]["id"]
    engine.set_active(user_id, False)

    response = _login(client)

    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "account_disabled"


def test_profile_requires_valid_token(api_client):
    client, _ = api_client

    missing = client.get("/auth/profile")
    assert missing.status_code == 401

    forged = client.get("/auth/profile", headers={"Authorization": "Bearer not.a.token"})
    assert forged.status_code == 401
    assert forged.json()["detail"]["error"] == "invalid_token"


def test_users_listing(api_client):
    client, _ = api_client
    _register(client)
    _register(client, username="maria", email="maria@test.com")

    listed = client.get("/users")
    assert listed.status_code == 200
    assert [user["username"] for user in listed.json()] == ["juanperez", "maria"]
    assert all("password_hash" not in user for user in listed.json())

    single = client.get("/users/2")
    assert single.status_code == 200
    assert single.json()["username"] == "maria"

    missing = client.get("/users/99")
    assert missing.status_code == 404
    assert missing.json()["detail"]["error"] == "account_not_found"


def test_application_wiring_exposes_health_and_metrics():
    app = create_app(Settings(bcrypt_rounds=4, jwt_secret="wiring-secret"))

    with TestClient(app) as client:
        assert client.get("/healthz").json() == {"status": "ok"}
        assert _register(client).status_code == 201
        assert _login(client).status_code == 200

        metrics = client.get("/metrics")
        assert metrics.status_code == 200
        assert "identity_auth_events_total" in metrics.text

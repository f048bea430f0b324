from conftest import auth_headers, register


def test_register_returns_token_and_public_account(client):
    resp = client.post(
        "/api/auth/register",
        json={"username": "alice", "name": "Alice Smith", "email": "alice@example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    user = body["user"]
    assert user["username"] == "alice"
    assert user["role"] == "patient"
    assert user["privacySettings"] == {"shareData": True, "emailNotifications": True, "smsNotifications": True}
    assert user["medicalHistory"]["allergies"] == []
    assert "password" not in user and "password_hash" not in user


def test_register_duplicate_username(client):
    register(client, "alice")
    resp = client.post(
        "/api/auth/register",
        json={"username": "alice", "name": "Other", "email": "other@example.com", "password": "secret123"},
    )
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "Username already exists", "error": "CONFLICT"}


def test_register_validation(client):
    resp = client.post(
        "/api/auth/register",
        json={"username": "bob", "name": "Bob", "email": "bob@example.com", "password": "secret123", "role": "admin"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "VALIDATION_ERROR"

    resp = client.post(
        "/api/auth/register",
        json={"username": "bob", "name": "Bob", "email": "bob@example.com", "password": "abc"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_REQUEST"

    resp = client.post(
        "/api/auth/register",
        json={"username": "bob", "name": "   ", "email": "bob@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "VALIDATION_ERROR"


def test_login_and_me(client):
    register(client, "alice")
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    me = client.get("/api/auth/me", headers=auth_headers(token))
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


def test_login_bad_credentials(client):
    register(client, "alice")
    wrong_password = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    unknown_user = client.post("/api/auth/login", json={"username": "zed", "password": "secret123"})
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_logout_revokes_only_that_session(client):
    first = register(client, "alice")
    second = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"}).json()["token"]

    resp = client.post("/api/auth/logout", headers=auth_headers(first))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}

    assert client.get("/api/auth/me", headers=auth_headers(first)).status_code == 401
    assert client.get("/api/auth/me", headers=auth_headers(second)).status_code == 200


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["auth"]["secret_key_configured"] is True


def test_security_headers(client):
    resp = client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_register_without_signing_key_leaves_username_free(client, monkeypatch):
    from telehealth.core.config import PLACEHOLDER_SECRET, settings

    monkeypatch.setattr(settings, "SECRET_KEY", PLACEHOLDER_SECRET)
    payload = {"username": "alice", "name": "Alice", "email": "alice@example.com", "password": "secret123"}
    refused = client.post("/api/auth/register", json=payload)
    assert refused.status_code == 500
    assert refused.json()["error"] == "UPDATE_FAILED"

    monkeypatch.undo()
    retried = client.post("/api/auth/register", json=payload)
    assert retried.status_code == 201

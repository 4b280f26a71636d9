# tests/test_auth_api.py

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_user_store
from services.auth_service import TokenService
from services.user_store import USERS_COLLECTION, UserStore

from .fakes import FakeDatabase, bearer


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_database_health_reports_ping_result(client: TestClient, database: FakeDatabase) -> None:
    assert client.get("/health/db").json()["database"] == "connected"

    database.healthy = False
    body = client.get("/health/db").json()
    assert body == {"status": "unavailable", "database": "disconnected"}


def test_lifespan_connects_and_creates_unique_email_index(client: TestClient, database: FakeDatabase) -> None:
    assert database.connected
    assert "email" in database.get_collection("users").unique_fields


def test_register_returns_token_and_public_user(client: TestClient, database: FakeDatabase) -> None:
    resp = client.post("/auth/register", json={"email": "  Alice@Example.com ", "password": "pw-123456"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "alice@example.com"
    assert set(body["user"]) == {"id", "email"}

    stored = database.get_collection("users").docs[0]
    assert stored["email"] == "alice@example.com"
    assert stored["password_hash"] != "pw-123456"


def test_register_then_login_resolves_same_identity(client: TestClient, register) -> None:
    registered = register("bob@example.com", "correct horse")

    resp = client.post("/auth/login", json={"email": "BOB@example.com", "password": "correct horse"})

    assert resp.status_code == 200
    assert resp.json()["user"] == registered["user"]


def test_duplicate_normalized_email_conflicts(client: TestClient, register) -> None:
    register("carol@example.com")

    resp = client.post("/auth/register", json={"email": " CAROL@example.com", "password": "other"})

    assert resp.status_code == 409
    assert resp.json() == {"message": "User with this email already exists"}


@pytest.mark.parametrize("path", ["/auth/register", "/auth/login"])
@pytest.mark.parametrize(
    "payload",
    [{}, {"email": "a@example.com"}, {"password": "pw"}, {"email": "   ", "password": "pw"}, {"email": "a@example.com", "password": ""}],
)
def test_missing_credentials_are_rejected(client: TestClient, database: FakeDatabase, path: str, payload: dict) -> None:
    resp = client.post(path, json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"message": "Email and password are required"}
    assert database.get_collection("users").docs == []


def test_malformed_body_is_a_validation_error(client: TestClient) -> None:
    resp = client.post("/auth/login", content="not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert "message" in resp.json()


def test_wrong_password_and_unknown_email_are_indistinguishable(client: TestClient, register) -> None:
    register("dave@example.com", "right-password")

    wrong_password = client.post("/auth/login", json={"email": "dave@example.com", "password": "nope"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@example.com", "password": "nope"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}


def test_login_form_returns_oauth2_token(client: TestClient, register) -> None:
    register("erin@example.com", "form-pass")

    resp = client.post("/auth/login/form", data={"username": "erin@example.com", "password": "form-pass"})

    assert resp.status_code == 200
    assert resp.json()["token_type"] == "bearer"
    me = client.get("/auth/me", headers=bearer(resp.json()["access_token"]))
    assert me.json()["user"]["email"] == "erin@example.com"


def test_me_resolves_token_identity(client: TestClient, register) -> None:
    registered = register("frank@example.com")

    resp = client.get("/auth/me", headers=bearer(registered["token"]))

    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["id"] == registered["user"]["id"]
    assert user["email"] == "frank@example.com"
    assert "createdAt" in user and "updatedAt" in user
    assert "password_hash" not in user and "passwordHash" not in user


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "abc"}, {"Authorization": "Token abc"}, {"Authorization": "Bearer "}],
)
def test_me_requires_bearer_header(client: TestClient, headers: dict) -> None:
    resp = client.get("/auth/me", headers=headers)

    assert resp.status_code == 401
    assert resp.json() == {"message": "Missing or invalid Authorization header"}
    assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_me_rejects_expired_token(client: TestClient, register, token_service: TokenService) -> None:
    user_id = register("gina@example.com")["user"]["id"]
    expired = token_service.issue(user_id, ttl=timedelta(seconds=-5))

    resp = client.get("/auth/me", headers=bearer(expired))

    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid or expired token"}


def test_me_rejects_tampered_token(client: TestClient, register) -> None:
    token_a = register("hank@example.com")["token"]
    token_b = register("ivy@example.com")["token"]
    header, _, signature = token_a.split(".")
    _, payload_b, _ = token_b.split(".")

    resp = client.get("/auth/me", headers=bearer(f"{header}.{payload_b}.{signature}"))

    assert resp.status_code == 401


def test_me_for_removed_user_is_not_found(client: TestClient, database: FakeDatabase, register) -> None:
    token = register("jill@example.com")["token"]
    database.get_collection("users").docs.clear()

    resp = client.get("/auth/me", headers=bearer(token))

    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_logout_is_stateless(client: TestClient, register) -> None:
    token = register("kate@example.com")["token"]

    resp = client.post("/auth/logout")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out"}
    assert client.get("/auth/me", headers=bearer(token)).status_code == 200


def test_password_longer_than_bcrypt_limit_registers_and_logs_in(client: TestClient) -> None:
    password = "x" * 100

    registered = client.post("/auth/register", json={"email": "long@example.com", "password": password})
    assert registered.status_code == 201

    resp = client.post("/auth/login", json={"email": "long@example.com", "password": password})
    assert resp.status_code == 200
    assert resp.json()["user"] == registered.json()["user"]


def test_concurrent_duplicate_insert_is_a_conflict(app, client: TestClient, database: FakeDatabase) -> None:
    class LookupMissesStore(UserStore):
        """Lookups never see the other registration, so only the unique index catches it."""

        async def get_by_email(self, email: str):
            return None

    app.dependency_overrides[get_user_store] = lambda: LookupMissesStore(database.get_collection(USERS_COLLECTION))
    try:
        first = client.post("/auth/register", json={"email": "race@example.com", "password": "pw-1"})
        second = client.post("/auth/register", json={"email": "RACE@example.com", "password": "pw-2"})
    finally:
        app.dependency_overrides.clear()

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"message": "User with this email already exists"}
    assert len(database.get_collection(USERS_COLLECTION).docs) == 1

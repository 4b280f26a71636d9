# tests/conftest.py

from __future__ import annotations

import os

# Settings are read once at import time, so pin them before importing the app.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_DIR"] = ""
os.environ["DEBUG"] = "false"

from collections.abc import Callable, Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app import create_app  # noqa: E402
from services.auth_service import TokenService  # noqa: E402

from .fakes import FakeDatabase  # noqa: E402


@pytest.fixture()
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def token_service() -> TokenService:
    return TokenService("test-secret", algorithm="HS256", expires_minutes=60)


@pytest.fixture()
def app(database: FakeDatabase, token_service: TokenService) -> FastAPI:
    """Application wired to an in-memory database and a fixed signing secret."""
    return create_app(database=database, token_service=token_service)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client: TestClient) -> Callable[..., dict]:
    """Register a user and return the response body."""

    def _register(email: str = "alice@example.com", password: str = "s3cret-pass") -> dict:
        resp = client.post("/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register

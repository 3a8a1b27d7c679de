# tests/conftest.py
from __future__ import annotations

import os

# before `config` is imported anywhere
os.environ.setdefault("JWT_SECRET", "nutriplan-test-secret-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")

import pytest
from fastapi.testclient import TestClient

from api.v1.deps import get_identity_provider
from config import settings
from main import app
from services.identity import ExternalIdentity, IdentityTokenError


@pytest.fixture
def client(tmp_path, monkeypatch):
    """App bound to a throw-away SQLite file; tables come from the lifespan."""
    monkeypatch.setattr(
        settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'nutriplan.db'}"
    )
    monkeypatch.setattr(settings, "firebase_credentials", None)
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── helpers shared by the API tests ──────────────────────────────────
def register(client, email: str, contrasena: str = "secreto123", **extra) -> dict:
    body = {
        "nombre": extra.pop("nombre", email.split("@")[0].title()),
        "email": email,
        "contrasena": contrasena,
        "aceptaTerminos": True,
        **extra,
    }
    r = client.post("/registro", json=body)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def login(client, email: str, contrasena: str = "secreto123") -> dict:
    r = client.post("/login", json={"email": email, "contrasena": contrasena})
    assert r.status_code == 200, r.text
    return r.json()["data"]


@pytest.fixture
def auth(client):
    """Bearer header for a freshly registered user."""
    register(client, "ana@correo.com")
    token = login(client, "ana@correo.com")["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth(client):
    register(client, "bruno@correo.com")
    token = login(client, "bruno@correo.com")["token"]
    return {"Authorization": f"Bearer {token}"}


class FakeIdentityProvider:
    """Accepts `good-<email>` tokens, rejects everything else."""

    def __init__(self, name: str | None = "Google User") -> None:
        self.name = name

    async def verify(self, id_token: str) -> ExternalIdentity:
        if not id_token.startswith("good-"):
            raise IdentityTokenError("bad token")
        return ExternalIdentity(email=id_token[len("good-"):], name=self.name, uid="uid-1")


@pytest.fixture
def fake_identity():
    provider = FakeIdentityProvider()
    app.dependency_overrides[get_identity_provider] = lambda: provider
    return provider

# tests/test_users.py
from __future__ import annotations

from conftest import login, register


# ── meta ─────────────────────────────────────────────────────────────
def test_root_banner_and_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "API de NutriPlan - Sistema de Planificación Nutricional"
    assert r.headers["X-Application"] == "NutriPlan"

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["database"] == "ok"


# ── registration / local login ───────────────────────────────────────
def test_register_then_login(client):
    r = client.post(
        "/registro",
        json={
            "nombre": "Ana",
            "email": "ana@correo.com",
            "contrasena": "secreto123",
            "aceptaTerminos": True,
            "ciudad": "Bogotá",
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Usuario creado exitosamente"
    user = body["data"]
    assert user["contrasena"] == ""
    assert user["rol"] == "usuario"
    assert user["ciudad"] == "Bogotá"
    assert user["localidad"] == ""
    assert isinstance(user["usuarioId"], int)

    data = login(client, "ana@correo.com")
    assert data["token"]
    assert data["usuario"] == user


def test_token_carries_the_stored_user_id(client):
    user = register(client, "ana@correo.com")
    token = login(client, "ana@correo.com")["token"]
    r = client.get("/usuarios/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["data"]["usuarioId"] == user["usuarioId"]


def test_registration_ignores_requested_role(client):
    user = register(client, "ana@correo.com", rol="admin")
    assert user["rol"] == "usuario"


def test_duplicate_email_is_a_conflict(client):
    register(client, "ana@correo.com")
    r = client.post(
        "/registro",
        json={"nombre": "Otra", "email": "ana@correo.com", "contrasena": "x"},
    )
    assert r.status_code == 409
    assert r.json()["error"] == "conflict"


def test_invalid_registration_body_is_400(client):
    r = client.post("/registro", json={"nombre": "Ana", "email": "no-es-email"})
    assert r.status_code == 400
    assert r.json() == {"message": "Solicitud inválida", "error": "bad_request"}


def test_wrong_password_and_unknown_email_look_the_same(client):
    register(client, "ana@correo.com")
    wrong = client.post("/login", json={"email": "ana@correo.com", "contrasena": "nope"})
    unknown = client.post("/login", json={"email": "nadie@correo.com", "contrasena": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()
    assert wrong.json()["error"] == "unauthorized"


# ── Google sign-in ───────────────────────────────────────────────────
def test_google_login_provisions_once(client, fake_identity):
    first = client.post("/login/google", json={"idToken": "good-gina@correo.com"})
    assert first.status_code == 200
    data = first.json()["data"]
    assert data["token"]
    assert data["usuario"]["email"] == "gina@correo.com"
    assert data["usuario"]["nombre"] == "Google User"
    assert data["usuario"]["contrasena"] == ""

    again = client.post("/login/google", json={"idToken": "good-gina@correo.com"})
    assert again.json()["data"]["usuario"]["usuarioId"] == data["usuario"]["usuarioId"]

    # no local password for a provisioned account
    r = client.post("/login", json={"email": "gina@correo.com", "contrasena": ""})
    assert r.status_code == 401


def test_google_login_links_existing_account(client, fake_identity):
    user = register(client, "ana@correo.com")
    r = client.post("/login/google", json={"idToken": "good-ana@correo.com"})
    assert r.status_code == 200
    assert r.json()["data"]["usuario"]["usuarioId"] == user["usuarioId"]


def test_google_login_without_name_uses_email_prefix(client, fake_identity):
    fake_identity.name = None
    r = client.post("/login/google", json={"idToken": "good-hugo@correo.com"})
    assert r.json()["data"]["usuario"]["nombre"] == "hugo"


def test_google_login_rejects_bad_token(client, fake_identity):
    r = client.post("/login/google", json={"idToken": "forged"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token de Google inválido"


def test_google_login_unconfigured_is_503(client):
    r = client.post("/login/google", json={"idToken": "good-gina@correo.com"})
    assert r.status_code == 503
    assert r.json()["error"] == "service_unavailable"


# ── /usuarios ────────────────────────────────────────────────────────
def test_users_require_a_token(client):
    r = client.get("/usuarios")
    assert r.status_code == 401
    assert r.json()["message"] == "Usuario no autenticado"
    assert r.headers["WWW-Authenticate"].startswith("Bearer")

    r = client.get("/usuarios", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token inválido o expirado"


def test_list_users_hides_passwords(client, auth, other_auth):
    r = client.get("/usuarios", headers=auth)
    assert r.status_code == 200
    users = r.json()["data"]
    assert {u["email"] for u in users} == {"ana@correo.com", "bruno@correo.com"}
    assert all(u["contrasena"] == "" for u in users)


def test_update_own_account_keeps_password_when_blank(client, auth):
    me = client.get("/usuarios/me", headers=auth).json()["data"]
    r = client.put(
        f"/usuarios/{me['usuarioId']}",
        headers=auth,
        json={"nombre": "Ana María", "email": "ana@correo.com", "contrasena": ""},
    )
    assert r.status_code == 200
    assert r.json()["data"]["nombre"] == "Ana María"
    login(client, "ana@correo.com", "secreto123")


def test_update_own_account_changes_password(client, auth):
    me = client.get("/usuarios/me", headers=auth).json()["data"]
    client.put(
        f"/usuarios/{me['usuarioId']}",
        headers=auth,
        json={"nombre": "Ana", "email": "ana@correo.com", "contrasena": "nueva456"},
    )
    login(client, "ana@correo.com", "nueva456")
    r = client.post("/login", json={"email": "ana@correo.com", "contrasena": "secreto123"})
    assert r.status_code == 401


def test_cannot_touch_someone_else(client, auth, other_auth):
    bruno = client.get("/usuarios/me", headers=other_auth).json()["data"]
    r = client.put(
        f"/usuarios/{bruno['usuarioId']}",
        headers=auth,
        json={"nombre": "Hack", "email": "bruno@correo.com"},
    )
    assert r.status_code == 403
    r = client.delete(f"/usuarios/{bruno['usuarioId']}", headers=auth)
    assert r.status_code == 403


def test_missing_user_is_404(client, auth):
    assert client.get("/usuarios/999", headers=auth).status_code == 404
    r = client.put(
        "/usuarios/999", headers=auth, json={"nombre": "X", "email": "x@correo.com"}
    )
    assert r.status_code == 404
    assert client.delete("/usuarios/999", headers=auth).status_code == 404


def test_email_taken_by_another_user_is_409(client, auth, other_auth):
    me = client.get("/usuarios/me", headers=auth).json()["data"]
    r = client.put(
        f"/usuarios/{me['usuarioId']}",
        headers=auth,
        json={"nombre": "Ana", "email": "bruno@correo.com"},
    )
    assert r.status_code == 409


def test_deleted_account_token_stops_working(client, auth):
    me = client.get("/usuarios/me", headers=auth).json()["data"]
    r = client.delete(f"/usuarios/{me['usuarioId']}", headers=auth)
    assert r.status_code == 200
    assert r.json()["data"] is None
    assert client.get("/usuarios/me", headers=auth).status_code == 401


# ── email spelling ───────────────────────────────────────────────────
def test_mixed_case_email_registers_and_logs_in(client):
    user = register(client, "Ana@Correo.COM")
    assert user["email"] == "ana@correo.com"

    data = login(client, "Ana@Correo.COM")
    assert data["usuario"]["usuarioId"] == user["usuarioId"]
    login(client, "ana@correo.com")


def test_email_case_does_not_bypass_uniqueness(client):
    register(client, "ana@correo.com")
    r = client.post(
        "/registro",
        json={"nombre": "Otra", "email": "ANA@correo.com", "contrasena": "x"},
    )
    assert r.status_code == 409


def test_google_login_matches_email_case_insensitively(client, fake_identity):
    user = register(client, "ana@correo.com")
    r = client.post("/login/google", json={"idToken": "good-Ana@Correo.com"})
    assert r.status_code == 200
    assert r.json()["data"]["usuario"]["usuarioId"] == user["usuarioId"]


# ── failed logins cost the same ──────────────────────────────────────
def test_unknown_email_still_runs_a_bcrypt_check(client, monkeypatch):
    import bcrypt

    calls = []
    real_checkpw = bcrypt.checkpw

    def counting_checkpw(password, hashed):
        calls.append(hashed)
        return real_checkpw(password, hashed)

    monkeypatch.setattr(bcrypt, "checkpw", counting_checkpw)

    register(client, "ana@correo.com")
    client.post("/login", json={"email": "ana@correo.com", "contrasena": "nope"})
    client.post("/login", json={"email": "nadie@correo.com", "contrasena": "nope"})
    assert len(calls) == 2

# tests/test_auth.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from config import settings
from services.auth import create_token, hash_password, verify_password, verify_token


# ── passwords ────────────────────────────────────────────────────────
def test_hash_is_salted_and_verifies():
    a = hash_password("secreto123")
    b = hash_password("secreto123")
    assert a != b
    assert a.startswith("$2")
    assert verify_password("secreto123", a)
    assert not verify_password("otra", a)


def test_empty_hash_never_matches():
    # accounts created through Google have no local password
    assert not verify_password("", "")
    assert not verify_password("anything", "")


def test_non_bcrypt_hash_is_rejected():
    assert not verify_password("plain", "plain")


def test_long_passwords_are_truncated_not_rejected():
    long_pw = "x" * 100
    hashed = hash_password(long_pw)
    assert verify_password(long_pw, hashed)


# ── tokens ───────────────────────────────────────────────────────────
def test_token_round_trip_claims():
    token = create_token(7, "ana@correo.com", "usuario")
    claims = verify_token(token)
    assert claims.user_id == 7
    assert claims.email == "ana@correo.com"
    assert claims.rol == "usuario"

    raw = jwt.decode(token, options={"verify_signature": False})
    assert raw["iss"] == settings.jwt_issuer
    assert raw["aud"] == settings.jwt_audience


def test_expired_token_is_rejected():
    token = create_token(7, "ana@correo.com", "usuario", ttl_minutes=-1)
    with pytest.raises(jwt.ExpiredSignatureError):
        verify_token(token)


def test_wrong_audience_is_rejected():
    token = jwt.encode(
        {
            "userId": 7,
            "iss": settings.jwt_issuer,
            "aud": "someone-else",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidAudienceError):
        verify_token(token)


def test_wrong_signature_is_rejected():
    token = jwt.encode(
        {
            "userId": 7,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        "not-the-secret",
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidSignatureError):
        verify_token(token)


def test_missing_user_id_is_rejected():
    token = jwt.encode(
        {
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm="HS256",
    )
    with pytest.raises(jwt.MissingRequiredClaimError):
        verify_token(token)

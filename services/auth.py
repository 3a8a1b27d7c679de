from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from config import settings

_ALGO = "HS256"
_BCRYPT_MAX_BYTES = 72


# ───────── passwords ─────────────────────────────────────────────────
def _pw_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_pw_bytes(password), salt).decode("utf-8")


@lru_cache
def dummy_hash() -> str:
    """A hash no account uses; checked against when the email is unknown."""
    return hash_password("nutriplan-no-such-account")


def verify_password(password: str, hashed: str) -> bool:
    """An empty stored hash belongs to an identity-provider-only account."""
    if not hashed or not password:
        return False
    try:
        return bcrypt.checkpw(_pw_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


# ───────── bearer tokens ─────────────────────────────────────────────
@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    rol: str


def create_token(user_id: int, email: str, rol: str, ttl_minutes: int | None = None) -> str:
    ttl = settings.jwt_ttl_minutes if ttl_minutes is None else ttl_minutes
    exp = datetime.now(timezone.utc) + timedelta(minutes=ttl)
    payload = {
        "userId": user_id,
        "email": email,
        "rol": rol,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": exp,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGO)


def verify_token(token: str) -> TokenClaims:
    """Raise `jwt.InvalidTokenError` on a bad signature, issuer, audience or expiry."""
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[_ALGO],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "iss", "aud", "userId"]},
    )
    user_id = payload["userId"]
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise jwt.InvalidTokenError("userId claim must be an integer")
    return TokenClaims(user_id=user_id, email=payload.get("email", ""), rol=payload.get("rol", ""))

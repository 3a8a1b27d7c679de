"""
Centralised settings loader.

Everything is read from the environment (or a local `.env` file) once, at
import time, and exposed as the module-level `settings` singleton.
"""

from __future__ import annotations
import json
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = Field("local", alias="ENV_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    # JSON array or comma-separated list
    cors_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="CORS_ORIGINS")

    # ─── database ───────────────────────────────────────────────────
    database_url: str | None = Field(None, alias="DATABASE_URL")
    db_driver: str = Field("postgresql+asyncpg", alias="DB_DRIVER")
    db_host: str | None = Field(None, alias="DB_HOST")
    db_port: int | None = Field(None, alias="DB_PORT")
    db_user: str | None = Field(None, alias="DB_USER")
    db_pass: str | None = Field(None, alias="DB_PASS")
    db_name: str | None = Field(None, alias="DB_NAME")
    db_ssl_root_cert: str | None = Field(None, alias="DB_SSL_ROOT_CERT")
    auto_create_tables: bool = Field(True, alias="AUTO_CREATE_TABLES")

    # ─── tokens / passwords ─────────────────────────────────────────
    jwt_secret: str = Field("changeme", alias="JWT_SECRET")
    jwt_issuer: str = Field("nutriplan", alias="JWT_ISSUER")
    jwt_audience: str = Field("nutriplan-app", alias="JWT_AUDIENCE")
    jwt_realm: str = Field("nutriplan", alias="JWT_REALM")
    jwt_ttl_minutes: int = Field(60, alias="JWT_TTL_MINUTES")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")

    # ─── Firebase (path to a service-account file, or its JSON) ─────
    firebase_credentials: str | None = Field(None, alias="FIREBASE_CREDENTIALS")

    # allow other teammates’ env-vars without crashing
    model_config = {
        "extra": "ignore",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def _async_driver(cls, v):
        """Hosted Postgres hands out postgres:// URLs; the engine needs asyncpg."""
        if isinstance(v, str):
            for prefix in ("postgres://", "postgresql://"):
                if v.startswith(prefix):
                    return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()

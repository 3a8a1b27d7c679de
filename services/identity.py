"""
services/identity.py
────────────────────────────────────────────────────────────────────────
Third-party identity exchange (Firebase / Google sign-in).

The Firebase Admin app is process-wide state: `init_firebase()` runs once
from the application lifespan and the resulting provider is handed to the
routes through `app.state`, never looked up globally.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import firebase_admin
from firebase_admin import auth, credentials
from starlette.concurrency import run_in_threadpool

_LOG = logging.getLogger(__name__)


class IdentityTokenError(Exception):
    """The provider rejected the identity token."""


@dataclass(frozen=True)
class ExternalIdentity:
    email: str
    name: str | None = None
    uid: str | None = None


class IdentityProvider(Protocol):
    async def verify(self, id_token: str) -> ExternalIdentity: ...


class FirebaseIdentityProvider:
    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    async def verify(self, id_token: str) -> ExternalIdentity:
        try:
            # fetches Google's public certs on a cold cache, so keep it off the loop
            claims = await run_in_threadpool(
                auth.verify_id_token, id_token, app=self._app
            )
        except (auth.InvalidIdTokenError, auth.CertificateFetchError, ValueError) as exc:
            _LOG.info("identity token rejected: %s", exc)
            raise IdentityTokenError("identity token rejected") from exc

        email = claims.get("email")
        if not email:
            raise IdentityTokenError("identity token carries no email")
        return ExternalIdentity(email=email, name=claims.get("name"), uid=claims.get("uid"))


def _load_credentials(raw: str) -> credentials.Certificate:
    if raw.lstrip().startswith("{"):
        return credentials.Certificate(json.loads(raw))
    return credentials.Certificate(str(Path(raw).expanduser()))


def init_firebase(raw_credentials: str | None) -> FirebaseIdentityProvider | None:
    """Initialise the default Firebase app at most once per process."""
    if not raw_credentials:
        _LOG.warning("FIREBASE_CREDENTIALS not set – Google sign-in disabled")
        return None

    try:
        app = firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(_load_credentials(raw_credentials))
        _LOG.info("Firebase app initialised (project %s)", app.project_id)
    return FirebaseIdentityProvider(app)

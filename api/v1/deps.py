"""
Shared FastAPI dependencies: caller identity and the identity provider.
"""
from __future__ import annotations

from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.schemas.common import MAX_DB_INT
from config import settings
from services.auth import verify_token
from services.db import Usuario, get_session
from services.identity import IdentityProvider

bearer_scheme = HTTPBearer(auto_error=False)

# path ids outside the column range are rejected as 400, not sent to the driver
IdPath = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": f'Bearer realm="{settings.jwt_realm}"'},
    )


async def current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session),
) -> int:
    """Resolve the caller from `Authorization: Bearer <token>` or answer 401."""
    if credentials is None:
        raise _unauthorized("Usuario no autenticado")
    try:
        claims = verify_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise _unauthorized("Token inválido o expirado")

    # the account may have been deleted since the token was issued
    if await db.get(Usuario, claims.user_id) is None:
        raise _unauthorized("Token inválido o expirado")
    return claims.user_id


def get_identity_provider(request: Request) -> IdentityProvider:
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Inicio de sesión con Google no disponible",
        )
    return provider

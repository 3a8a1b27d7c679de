from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import get_identity_provider
from api.v1.schemas import (
    ApiResponse,
    Credentials,
    GoogleLogin,
    LoginData,
    UsuarioCreate,
    UsuarioOut,
)
from services.auth import create_token
from services.dao import UsuarioDAO
from services.db import Usuario, get_session
from services.identity import IdentityProvider, IdentityTokenError

_LOG = logging.getLogger(__name__)

router = APIRouter()


def _login_payload(user: Usuario) -> LoginData:
    token = create_token(user.usuario_id, user.email, user.rol)
    return LoginData(token=token, usuario=UsuarioOut.from_row(user))


# ───────────────────────── register ─────────────────────────
@router.post(
    "/registro",
    response_model=ApiResponse[UsuarioOut],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: UsuarioCreate,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[UsuarioOut]:
    users = UsuarioDAO(db)
    if await users.find_by_email(body.email) is not None:
        raise HTTPException(status.HTTP_409_CONFLICT, "El email ya está registrado")

    user_id = await users.create(**body.model_dump())
    user = await users.read(user_id)
    if user is None:
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "No se pudo recuperar el usuario creado"
        )
    return ApiResponse[UsuarioOut](data=UsuarioOut.from_row(user), message="Usuario creado exitosamente")


# ───────────────────────── local login ──────────────────────
@router.post("/login", response_model=ApiResponse[LoginData])
async def login(
    body: Credentials,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[LoginData]:
    user = await UsuarioDAO(db).authenticate(body.email, body.contrasena)
    if user is None:
        # same answer for unknown email and wrong password
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Credenciales inválidas")
    return ApiResponse[LoginData](data=_login_payload(user), message="Inicio de sesión exitoso")


# ───────────────────────── Google login ─────────────────────
@router.post("/login/google", response_model=ApiResponse[LoginData])
async def login_google(
    body: GoogleLogin,
    provider: IdentityProvider = Depends(get_identity_provider),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[LoginData]:
    try:
        identity = await provider.verify(body.id_token)
    except IdentityTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token de Google inválido")

    email = identity.email.strip().lower()
    users = UsuarioDAO(db)
    user = await users.find_by_email(email)
    if user is None:
        user_id = await users.create(
            nombre=identity.name or email.split("@")[0],
            email=email,
            contrasena="",
        )
        user = await users.read(user_id)
        _LOG.info("provisioned Google account %s as user %s", email, user_id)
    return ApiResponse[LoginData](data=_login_payload(user), message="Inicio de sesión exitoso")

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.crud import page_params
from api.v1.deps import IdPath, current_user_id
from api.v1.schemas import ApiResponse, UsuarioOut, UsuarioUpdate
from services.dao import UsuarioDAO
from services.db import get_session

router = APIRouter(dependencies=[Depends(current_user_id)])


async def _own_account(users: UsuarioDAO, user_id: int, caller: int) -> None:
    if await users.read(user_id) is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")
    if user_id != caller:
        raise HTTPException(
            status.HTTP_403_FORBIDDEN, "No tienes permiso para modificar este usuario"
        )


# ───────────────────────── list ─────────────────────────────
@router.get("", response_model=ApiResponse[list[UsuarioOut]])
async def list_users(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[UsuarioOut]]:
    rows = await UsuarioDAO(db).list(**paging)
    return ApiResponse[list[UsuarioOut]](data=[UsuarioOut.from_row(u) for u in rows])


# ───────────────────────── me ───────────────────────────────
@router.get("/me", response_model=ApiResponse[UsuarioOut])
async def fetch_me(
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[UsuarioOut]:
    usr = await UsuarioDAO(db).read(caller)
    if usr is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")
    return ApiResponse[UsuarioOut](data=UsuarioOut.from_row(usr))


# ───────────────────────── fetch one ────────────────────────
@router.get("/{user_id}", response_model=ApiResponse[UsuarioOut])
async def fetch_user(
    user_id: IdPath,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[UsuarioOut]:
    usr = await UsuarioDAO(db).read(user_id)
    if usr is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")
    return ApiResponse[UsuarioOut](data=UsuarioOut.from_row(usr))


# ───────────────────────── update ───────────────────────────
@router.put("/{user_id}", response_model=ApiResponse[UsuarioOut])
async def update_user(
    user_id: IdPath,
    body: UsuarioUpdate,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[UsuarioOut]:
    users = UsuarioDAO(db)
    await _own_account(users, user_id, caller)
    other = await users.find_by_email(body.email)
    if other is not None and other.usuario_id != user_id:
        raise HTTPException(status.HTTP_409_CONFLICT, "El email ya está registrado")

    if not await users.update(user_id, **body.model_dump()):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")
    usr = await users.read(user_id)
    return ApiResponse[UsuarioOut](
        data=UsuarioOut.from_row(usr), message="Usuario actualizado correctamente"
    )


# ───────────────────────── delete ───────────────────────────
@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: IdPath,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    users = UsuarioDAO(db)
    await _own_account(users, user_id, caller)
    if not await users.delete(user_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")
    return ApiResponse[None](data=None, message="Usuario eliminado correctamente")

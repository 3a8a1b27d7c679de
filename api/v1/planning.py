# api/v1/planning.py
"""Goals, menus and the ingredients picked for each menu."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.crud import crud_router
from api.v1.deps import IdPath, current_user_id
from api.v1.schemas import (
    ApiResponse,
    MenuIn,
    MenuOut,
    ObjetivoIn,
    ObjetivoOut,
    SeleccionIn,
    SeleccionOut,
)
from services.dao import MenuDAO, ObjetivoDAO, SeleccionIngredienteDAO
from services.db import Menu, SeleccionIngrediente, get_session

objetivos = crud_router(
    dao=ObjetivoDAO,
    schema_in=ObjetivoIn,
    schema_out=ObjetivoOut,
    label="Objetivo",
    owner_field="usuario_id",
    shared_unowned=True,
)

menus = crud_router(
    dao=MenuDAO,
    schema_in=MenuIn,
    schema_out=MenuOut,
    label="Menú",
    owner_field="usuario_id",
)


# ───────────────────────── helpers ──────────────────────────
async def _own_menu(db: AsyncSession, menu_id: int, caller: int) -> Menu:
    menu = await MenuDAO(db).read(menu_id)
    if menu is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Menú no encontrado")
    if menu.usuario_id != caller:
        raise HTTPException(
            status.HTTP_403_FORBIDDEN, "No tienes permiso para modificar este menú"
        )
    return menu


async def _selection_in_menu(
    selections: SeleccionIngredienteDAO, menu_id: int, seleccion_id: int
) -> SeleccionIngrediente:
    row = await selections.read(seleccion_id)
    if row is None or row.menu_id != menu_id:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, "Selección de ingrediente no encontrada"
        )
    return row


# ───────────────────────── menu ingredients ─────────────────
@menus.get("/{menu_id}/ingredientes", response_model=ApiResponse[list[SeleccionOut]])
async def list_menu_ingredients(
    menu_id: IdPath,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[SeleccionOut]]:
    await _own_menu(db, menu_id, caller)
    rows = await SeleccionIngredienteDAO(db).by_menu(menu_id)
    return ApiResponse[list[SeleccionOut]](data=[SeleccionOut.model_validate(r) for r in rows])


@menus.post(
    "/{menu_id}/ingredientes",
    response_model=ApiResponse[SeleccionOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_menu_ingredient(
    menu_id: IdPath,
    body: SeleccionIn,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[SeleccionOut]:
    await _own_menu(db, menu_id, caller)
    selections = SeleccionIngredienteDAO(db)
    seleccion_id = await selections.create(menu_id=menu_id, **body.model_dump())
    row = await selections.read(seleccion_id)
    return ApiResponse[SeleccionOut](
        data=SeleccionOut.model_validate(row), message="Ingrediente agregado al menú"
    )


@menus.put(
    "/{menu_id}/ingredientes/{seleccion_id}", response_model=ApiResponse[SeleccionOut]
)
async def update_menu_ingredient(
    menu_id: IdPath,
    seleccion_id: IdPath,
    body: SeleccionIn,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[SeleccionOut]:
    await _own_menu(db, menu_id, caller)
    selections = SeleccionIngredienteDAO(db)
    await _selection_in_menu(selections, menu_id, seleccion_id)
    await selections.update(seleccion_id, menu_id=menu_id, **body.model_dump())
    row = await selections.read(seleccion_id)
    return ApiResponse[SeleccionOut](
        data=SeleccionOut.model_validate(row),
        message="Ingrediente del menú actualizado correctamente",
    )


@menus.delete(
    "/{menu_id}/ingredientes/{seleccion_id}", response_model=ApiResponse[None]
)
async def delete_menu_ingredient(
    menu_id: IdPath,
    seleccion_id: IdPath,
    caller: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    await _own_menu(db, menu_id, caller)
    selections = SeleccionIngredienteDAO(db)
    await _selection_in_menu(selections, menu_id, seleccion_id)
    await selections.delete(seleccion_id)
    return ApiResponse[None](data=None, message="Ingrediente eliminado del menú correctamente")

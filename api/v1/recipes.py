# api/v1/recipes.py
"""Recipes, their ingredient lists and the recipes users save."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.crud import crud_router, page_params
from api.v1.deps import IdPath, current_user_id
from api.v1.schemas import (
    ApiResponse,
    RecetaGuardadaIn,
    RecetaGuardadaOut,
    RecetaIn,
    RecetaIngredienteIn,
    RecetaIngredienteOut,
    RecetaIngredienteUpdate,
    RecetaOut,
)
from services.dao import RecetaDAO, RecetaGuardadaDAO, RecetaIngredienteDAO
from services.db import get_session

# ───────────────────────── recipes ──────────────────────────
recetas = APIRouter()


@recetas.get(
    "/search",
    response_model=ApiResponse[list[RecetaOut]],
    dependencies=[Depends(current_user_id)],
)
async def search_recipes(
    q: str = Query("", description="substring of the recipe name"),
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[RecetaOut]]:
    rows = await RecetaDAO(db).search_by_name(q, **paging)
    return ApiResponse[list[RecetaOut]](data=[RecetaOut.model_validate(r) for r in rows])


@recetas.get(
    "/tipo_comida/{tipo_comida_id}",
    response_model=ApiResponse[list[RecetaOut]],
    dependencies=[Depends(current_user_id)],
)
async def recipes_by_meal_type(
    tipo_comida_id: IdPath,
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[RecetaOut]]:
    rows = await RecetaDAO(db).by_tipo_comida(tipo_comida_id, **paging)
    return ApiResponse[list[RecetaOut]](data=[RecetaOut.model_validate(r) for r in rows])


crud_router(
    dao=RecetaDAO,
    schema_in=RecetaIn,
    schema_out=RecetaOut,
    label="Receta",
    feminine=True,
    router=recetas,
)


# ───────────────────────── saved recipes ────────────────────
recetas_guardadas = crud_router(
    dao=RecetaGuardadaDAO,
    schema_in=RecetaGuardadaIn,
    schema_out=RecetaGuardadaOut,
    label="Receta guardada",
    feminine=True,
    owner_field="usuario_id",
)


# ───────────────────────── recipe ⇄ ingredient ──────────────
receta_ingredientes = APIRouter(dependencies=[Depends(current_user_id)])

_LINK_NOT_FOUND = "Relación receta-ingrediente no encontrada"


def _link_out(row) -> RecetaIngredienteOut:
    return RecetaIngredienteOut.model_validate(row)


@receta_ingredientes.get("", response_model=ApiResponse[list[RecetaIngredienteOut]])
async def list_links(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[RecetaIngredienteOut]]:
    rows = await RecetaIngredienteDAO(db).list(**paging)
    return ApiResponse[list[RecetaIngredienteOut]](data=[_link_out(r) for r in rows])


@receta_ingredientes.get(
    "/receta/{receta_id}", response_model=ApiResponse[list[RecetaIngredienteOut]]
)
async def links_for_recipe(
    receta_id: IdPath,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[RecetaIngredienteOut]]:
    rows = await RecetaIngredienteDAO(db).by_receta(receta_id)
    return ApiResponse[list[RecetaIngredienteOut]](data=[_link_out(r) for r in rows])


@receta_ingredientes.get(
    "/{receta_id}/{ingrediente_id}", response_model=ApiResponse[RecetaIngredienteOut]
)
async def fetch_link(
    receta_id: IdPath,
    ingrediente_id: IdPath,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[RecetaIngredienteOut]:
    row = await RecetaIngredienteDAO(db).read(receta_id, ingrediente_id)
    if row is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, _LINK_NOT_FOUND)
    return ApiResponse[RecetaIngredienteOut](data=_link_out(row))


@receta_ingredientes.post(
    "",
    response_model=ApiResponse[RecetaIngredienteOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_link(
    body: RecetaIngredienteIn,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[RecetaIngredienteOut]:
    links = RecetaIngredienteDAO(db)
    receta_id, ingrediente_id = await links.create(**body.model_dump())
    row = await links.read(receta_id, ingrediente_id)
    return ApiResponse[RecetaIngredienteOut](
        data=_link_out(row), message="Ingrediente agregado a la receta"
    )


@receta_ingredientes.put(
    "/{receta_id}/{ingrediente_id}", response_model=ApiResponse[RecetaIngredienteOut]
)
async def update_link(
    receta_id: IdPath,
    ingrediente_id: IdPath,
    body: RecetaIngredienteUpdate,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[RecetaIngredienteOut]:
    links = RecetaIngredienteDAO(db)
    if not await links.update(receta_id, ingrediente_id, **body.model_dump()):
        raise HTTPException(status.HTTP_404_NOT_FOUND, _LINK_NOT_FOUND)
    row = await links.read(receta_id, ingrediente_id)
    return ApiResponse[RecetaIngredienteOut](
        data=_link_out(row), message="Relación receta-ingrediente actualizada"
    )


@receta_ingredientes.delete(
    "/{receta_id}/{ingrediente_id}", response_model=ApiResponse[None]
)
async def delete_link(
    receta_id: IdPath,
    ingrediente_id: IdPath,
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[None]:
    if not await RecetaIngredienteDAO(db).delete(receta_id, ingrediente_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, _LINK_NOT_FOUND)
    return ApiResponse[None](data=None, message="Relación receta-ingrediente eliminada")

# api/v1/catalogue.py
"""Ingredient categories, ingredients, preparation methods and meal types."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.crud import crud_router, page_params
from api.v1.deps import IdPath, current_user_id
from api.v1.schemas import (
    ApiResponse,
    CategoriaIn,
    CategoriaOut,
    IngredienteIn,
    IngredienteOut,
    MetodoIn,
    MetodoOut,
    TipoComidaIn,
    TipoComidaOut,
)
from services.dao import CategoriaDAO, IngredienteDAO, MetodoDAO, TipoComidaDAO
from services.db import get_session

categorias = crud_router(
    dao=CategoriaDAO,
    schema_in=CategoriaIn,
    schema_out=CategoriaOut,
    label="Categoría",
    feminine=True,
)

metodos = crud_router(
    dao=MetodoDAO,
    schema_in=MetodoIn,
    schema_out=MetodoOut,
    label="Método",
)


def tipos_comida_router() -> APIRouter:
    # mounted twice: /tipos_comida and the older /comidas path
    return crud_router(
        dao=TipoComidaDAO,
        schema_in=TipoComidaIn,
        schema_out=TipoComidaOut,
        label="Tipo de comida",
    )


# ───────────────────────── ingredients ──────────────────────
ingredientes = APIRouter()


@ingredientes.get(
    "/search",
    response_model=ApiResponse[list[IngredienteOut]],
    dependencies=[Depends(current_user_id)],
)
async def search_ingredients(
    q: str = Query("", description="substring of the ingredient name"),
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[IngredienteOut]]:
    rows = await IngredienteDAO(db).search_by_name(q, **paging)
    return ApiResponse[list[IngredienteOut]](
        data=[IngredienteOut.model_validate(r) for r in rows]
    )


@ingredientes.get(
    "/categoria/{categoria_id}",
    response_model=ApiResponse[list[IngredienteOut]],
    dependencies=[Depends(current_user_id)],
)
async def ingredients_by_category(
    categoria_id: IdPath,
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[IngredienteOut]]:
    rows = await IngredienteDAO(db).by_categoria(categoria_id, **paging)
    return ApiResponse[list[IngredienteOut]](
        data=[IngredienteOut.model_validate(r) for r in rows]
    )


crud_router(
    dao=IngredienteDAO,
    schema_in=IngredienteIn,
    schema_out=IngredienteOut,
    label="Ingrediente",
    router=ingredientes,
)

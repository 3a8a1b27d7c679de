# api/v1/public.py
"""Read-only catalogue listings that need no token."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.crud import page_params
from api.v1.schemas import (
    ApiResponse,
    CategoriaOut,
    IngredienteOut,
    MetodoOut,
    ObjetivoOut,
    RecetaOut,
    TipoComidaOut,
)
from services.dao import (
    CategoriaDAO,
    IngredienteDAO,
    MetodoDAO,
    ObjetivoDAO,
    RecetaDAO,
    TipoComidaDAO,
)
from services.db import get_session

router = APIRouter()


@router.get("/categorias", response_model=ApiResponse[list[CategoriaOut]])
async def public_categories(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[CategoriaOut]]:
    rows = await CategoriaDAO(db).list(**paging)
    return ApiResponse[list[CategoriaOut]](data=[CategoriaOut.model_validate(r) for r in rows])


@router.get("/ingredientes", response_model=ApiResponse[list[IngredienteOut]])
async def public_ingredients(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[IngredienteOut]]:
    rows = await IngredienteDAO(db).list(**paging)
    return ApiResponse[list[IngredienteOut]](
        data=[IngredienteOut.model_validate(r) for r in rows]
    )


@router.get("/metodos", response_model=ApiResponse[list[MetodoOut]])
async def public_methods(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[MetodoOut]]:
    rows = await MetodoDAO(db).list(**paging)
    return ApiResponse[list[MetodoOut]](data=[MetodoOut.model_validate(r) for r in rows])


@router.get("/comidas", response_model=ApiResponse[list[TipoComidaOut]])
@router.get("/tipos_comida", response_model=ApiResponse[list[TipoComidaOut]])
async def public_meal_types(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[TipoComidaOut]]:
    rows = await TipoComidaDAO(db).list(**paging)
    return ApiResponse[list[TipoComidaOut]](
        data=[TipoComidaOut.model_validate(r) for r in rows]
    )


@router.get("/recetas", response_model=ApiResponse[list[RecetaOut]])
async def public_recipes(
    paging: dict = Depends(page_params),
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[RecetaOut]]:
    rows = await RecetaDAO(db).list(**paging)
    return ApiResponse[list[RecetaOut]](data=[RecetaOut.model_validate(r) for r in rows])


@router.get("/objetivos", response_model=ApiResponse[list[ObjetivoOut]])
async def public_goals(
    db: AsyncSession = Depends(get_session),
) -> ApiResponse[list[ObjetivoOut]]:
    """Only the shared goals; personal ones stay private."""
    rows = await ObjetivoDAO(db).shared()
    return ApiResponse[list[ObjetivoOut]](data=[ObjetivoOut.model_validate(r) for r in rows])

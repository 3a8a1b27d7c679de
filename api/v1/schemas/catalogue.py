from __future__ import annotations

from pydantic import Field

from .common import CamelModel, DbId


class CategoriaIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=50)


class CategoriaOut(CategoriaIn):
    categoria_id: int


class IngredienteIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    categoria_id: DbId
    calorias: float | None = None
    fit: bool = False
    disponible_bogota: bool = True
    fotografia: str | None = Field(None, max_length=255)


class IngredienteOut(IngredienteIn):
    ingrediente_id: int


class MetodoIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: str | None = None


class MetodoOut(MetodoIn):
    metodo_id: int


class TipoComidaIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=50)


class TipoComidaOut(TipoComidaIn):
    tipo_comida_id: int

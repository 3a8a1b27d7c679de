from __future__ import annotations
from datetime import datetime

from pydantic import Field

from .common import MAX_DB_INT, CamelModel, DbId, Quantity


class ObjetivoIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    tiene_tiempo: bool = False
    usuario_id: int | None = Field(None, ge=0, le=MAX_DB_INT)


class ObjetivoOut(CamelModel):
    objetivo_id: int
    nombre: str
    tiene_tiempo: bool
    fecha_creacion: datetime | None = None
    usuario_id: int | None = None


class MenuIn(CamelModel):
    usuario_id: int | None = Field(None, ge=0, le=MAX_DB_INT)
    objetivo_id: DbId
    comida_id: DbId
    metodo_id: DbId | None = None


class MenuOut(CamelModel):
    menu_id: int
    usuario_id: int
    objetivo_id: int
    comida_id: int
    fecha_creacion: datetime | None = None
    metodo_id: int | None = None


class SeleccionIn(CamelModel):
    ingrediente_id: DbId
    cantidad: Quantity | None = None


class SeleccionOut(CamelModel):
    seleccion_id: int
    menu_id: int
    ingrediente_id: int
    cantidad: float | None = None
    nombre_ingrediente: str | None = None
    calorias: float | None = None

from __future__ import annotations
from datetime import datetime

from pydantic import Field

from .common import MAX_DB_INT, CamelModel, DbId, Quantity


class RecetaIn(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=100)
    tipo_comida_id: DbId
    fit: bool = False
    instrucciones: str
    tiempo_preparacion: int | None = Field(None, ge=0, le=MAX_DB_INT)
    disponible_bogota: bool = True
    metodo_id: DbId | None = None


class RecetaOut(RecetaIn):
    receta_id: int


class RecetaIngredienteIn(CamelModel):
    receta_id: DbId
    ingrediente_id: DbId
    cantidad: Quantity | None = None
    unidad: str | None = Field(None, max_length=50)


class RecetaIngredienteUpdate(CamelModel):
    cantidad: Quantity | None = None
    unidad: str | None = Field(None, max_length=50)


class RecetaIngredienteOut(RecetaIngredienteIn):
    nombre_ingrediente: str | None = None


class RecetaGuardadaIn(CamelModel):
    # defaults to the caller; anything else is rejected
    usuario_id: int | None = Field(None, ge=0, le=MAX_DB_INT)
    receta_id: DbId
    comentario_personal: str | None = None


class RecetaGuardadaOut(CamelModel):
    guardado_id: int
    usuario_id: int
    receta_id: int
    fecha_guardado: datetime | None = None
    comentario_personal: str | None = None
    nombre_receta: str | None = None

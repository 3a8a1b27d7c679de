from __future__ import annotations
from datetime import datetime

from pydantic import Field

from .common import CamelModel, Email, LoginEmail


class UsuarioCreate(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    email: Email
    contrasena: str = Field(..., min_length=1)
    acepta_terminos: bool = False
    ciudad: str = Field("", max_length=100)
    localidad: str = Field("", max_length=100)


class UsuarioUpdate(CamelModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    email: Email
    # empty ➜ keep the current password
    contrasena: str = ""
    acepta_terminos: bool = False
    ciudad: str = Field("", max_length=100)
    localidad: str = Field("", max_length=100)


class UsuarioOut(CamelModel):
    """Sanitised user: the password never leaves the server."""

    usuario_id: int
    nombre: str
    email: str
    contrasena: str = ""
    acepta_terminos: bool
    rol: str
    fecha_registro: datetime | None = None
    ciudad: str
    localidad: str

    @classmethod
    def from_row(cls, row) -> "UsuarioOut":
        out = cls.model_validate(row, from_attributes=True)
        return out.model_copy(update={"contrasena": ""})


class Credentials(CamelModel):
    email: LoginEmail
    contrasena: str


class GoogleLogin(CamelModel):
    id_token: str = Field(..., min_length=1)


class LoginData(CamelModel):
    token: str
    usuario: UsuarioOut

"""Re-export individual schema modules for easy imports."""

from .common import ApiError, ApiResponse, CamelModel
from .user import Credentials, GoogleLogin, LoginData, UsuarioCreate, UsuarioOut, UsuarioUpdate
from .catalogue import (
    CategoriaIn,
    CategoriaOut,
    IngredienteIn,
    IngredienteOut,
    MetodoIn,
    MetodoOut,
    TipoComidaIn,
    TipoComidaOut,
)
from .recipe import (
    RecetaGuardadaIn,
    RecetaGuardadaOut,
    RecetaIn,
    RecetaIngredienteIn,
    RecetaIngredienteOut,
    RecetaIngredienteUpdate,
    RecetaOut,
)
from .planning import MenuIn, MenuOut, ObjetivoIn, ObjetivoOut, SeleccionIn, SeleccionOut

__all__ = [
    "ApiError",
    "ApiResponse",
    "CamelModel",
    "Credentials",
    "GoogleLogin",
    "LoginData",
    "UsuarioCreate",
    "UsuarioOut",
    "UsuarioUpdate",
    "CategoriaIn",
    "CategoriaOut",
    "IngredienteIn",
    "IngredienteOut",
    "MetodoIn",
    "MetodoOut",
    "TipoComidaIn",
    "TipoComidaOut",
    "RecetaIn",
    "RecetaOut",
    "RecetaIngredienteIn",
    "RecetaIngredienteOut",
    "RecetaIngredienteUpdate",
    "RecetaGuardadaIn",
    "RecetaGuardadaOut",
    "ObjetivoIn",
    "ObjetivoOut",
    "MenuIn",
    "MenuOut",
    "SeleccionIn",
    "SeleccionOut",
]

# api/v1/router.py
from fastapi import APIRouter

from . import auth, catalogue, planning, public, recipes, users
from .schemas import ApiError

# every failure is rendered as the ApiError envelope by core.errors
api_router = APIRouter(
    responses={
        400: {"model": ApiError},
        401: {"model": ApiError},
        500: {"model": ApiError},
    }
)

api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(users.router, prefix="/usuarios", tags=["Usuarios"])

# catalogue
api_router.include_router(catalogue.categorias, prefix="/categorias", tags=["Categorías"])
api_router.include_router(catalogue.ingredientes, prefix="/ingredientes", tags=["Ingredientes"])
api_router.include_router(catalogue.metodos, prefix="/metodos", tags=["Métodos"])
api_router.include_router(
    catalogue.tipos_comida_router(), prefix="/tipos_comida", tags=["Tipos de comida"]
)
api_router.include_router(
    catalogue.tipos_comida_router(), prefix="/comidas", tags=["Tipos de comida"]
)

# recipes
api_router.include_router(recipes.recetas, prefix="/recetas", tags=["Recetas"])
api_router.include_router(
    recipes.receta_ingredientes, prefix="/receta_ingredientes", tags=["Recetas"]
)
api_router.include_router(
    recipes.recetas_guardadas, prefix="/recetas_guardadas", tags=["Recetas guardadas"]
)

# planning (owner-scoped)
api_router.include_router(planning.objetivos, prefix="/objetivos", tags=["Objetivos"])
api_router.include_router(planning.menus, prefix="/menus", tags=["Menús"])

# no token required
api_router.include_router(public.router, prefix="/public", tags=["Público"])

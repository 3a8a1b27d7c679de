"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for the eleven NutriPlan tables
* Session helpers used by routers / scripts
"""
from __future__ import annotations

import logging
import ssl
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    event,
    func,
    text,
)
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from config import settings

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None
_SESSIONMAKER: async_sessionmaker[AsyncSession] | None = None


def _database_url() -> str | URL:
    # 1) full URL
    if settings.database_url:
        return settings.database_url

    # 2) assembled from the individual DB_* parts
    if not (settings.db_host and settings.db_name):
        raise RuntimeError("Set either DATABASE_URL or DB_HOST + DB_NAME env vars")
    return URL.create(
        settings.db_driver,
        username=settings.db_user,
        password=settings.db_pass,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine() -> AsyncEngine:
    url = _database_url()
    connect_args = {}
    if settings.db_ssl_root_cert:
        # verify-full against the provider's root certificate
        connect_args["ssl"] = ssl.create_default_context(cafile=settings.db_ssl_root_cert)

    eng = create_async_engine(url, pool_pre_ping=True, connect_args=connect_args)
    if eng.dialect.name == "sqlite":
        event.listen(eng.sync_engine, "connect", _enable_sqlite_fks)
    _LOG.info("database engine ready (%s)", eng.dialect.name)
    return eng


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = _create_engine()
    return _ENGINE


async def dispose_engine() -> None:
    """Close every pooled connection; the next `engine()` call starts fresh."""
    global _ENGINE, _SESSIONMAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSIONMAKER = None


# ───────── declarative base ──────────────────────────────────────────
class Base(AsyncAttrs, DeclarativeBase):
    pass


# ───────── users ─────────────────────────────────────────────────────


class Usuario(Base):
    __tablename__ = "usuarios"

    usuario_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    contrasena: Mapped[str] = mapped_column(String(255), default="")  # bcrypt hash or ""
    acepta_terminos: Mapped[bool] = mapped_column(Boolean, default=False)
    rol: Mapped[str] = mapped_column(String(50), default="usuario")
    fecha_registro: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    ciudad: Mapped[str] = mapped_column(String(100), default="")
    localidad: Mapped[str] = mapped_column(String(100), default="")

    def __repr__(self) -> str:
        return f"<Usuario(id={self.usuario_id}, email='{self.email}')>"


# ───────── ingredient catalogue ──────────────────────────────────────


class CategoriaIngrediente(Base):
    __tablename__ = "categorias_ingredientes"

    categoria_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(50))


class Ingrediente(Base):
    __tablename__ = "ingredientes"

    ingrediente_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100))
    categoria_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categorias_ingredientes.categoria_id")
    )
    calorias: Mapped[float | None] = mapped_column(Float, nullable=True)
    fit: Mapped[bool] = mapped_column(Boolean, default=False)
    disponible_bogota: Mapped[bool] = mapped_column(Boolean, default=True)
    fotografia: Mapped[str | None] = mapped_column(String(255), nullable=True)


class MetodoPreparacion(Base):
    __tablename__ = "metodos_preparacion"

    metodo_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100))
    descripcion: Mapped[str | None] = mapped_column(Text, nullable=True)


class TipoComida(Base):
    __tablename__ = "tipos_comida"

    tipo_comida_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(50))


# ───────── recipes ───────────────────────────────────────────────────


class Receta(Base):
    __tablename__ = "recetas"

    receta_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100))
    tipo_comida_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tipos_comida.tipo_comida_id")
    )
    fit: Mapped[bool] = mapped_column(Boolean, default=False)
    instrucciones: Mapped[str] = mapped_column(Text)
    tiempo_preparacion: Mapped[int | None] = mapped_column(Integer, nullable=True)
    disponible_bogota: Mapped[bool] = mapped_column(Boolean, default=True)
    metodo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("metodos_preparacion.metodo_id"), nullable=True
    )


class RecetaIngrediente(Base):
    """Association row: composite key (receta_id, ingrediente_id)."""

    __tablename__ = "receta_ingredientes"

    receta_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recetas.receta_id"), primary_key=True
    )
    ingrediente_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ingredientes.ingrediente_id"), primary_key=True
    )
    cantidad: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    unidad: Mapped[str | None] = mapped_column(String(50), nullable=True)

    ingrediente: Mapped[Ingrediente] = relationship(lazy="joined")

    @property
    def nombre_ingrediente(self) -> str | None:
        return self.ingrediente.nombre if self.ingrediente else None


class RecetaGuardada(Base):
    __tablename__ = "recetas_guardadas"

    guardado_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.usuario_id"))
    receta_id: Mapped[int] = mapped_column(Integer, ForeignKey("recetas.receta_id"))
    fecha_guardado: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    comentario_personal: Mapped[str | None] = mapped_column(Text, nullable=True)

    receta: Mapped[Receta] = relationship(lazy="joined")

    @property
    def nombre_receta(self) -> str | None:
        return self.receta.nombre if self.receta else None


# ───────── planning ──────────────────────────────────────────────────


class Objetivo(Base):
    __tablename__ = "objetivos"

    objetivo_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(100))
    tiene_tiempo: Mapped[bool] = mapped_column(Boolean, default=False)
    fecha_creacion: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    # NULL owner = shared goal seeded with the catalogue
    usuario_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("usuarios.usuario_id"), nullable=True
    )


class Menu(Base):
    __tablename__ = "menus"

    menu_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    usuario_id: Mapped[int] = mapped_column(Integer, ForeignKey("usuarios.usuario_id"))
    objetivo_id: Mapped[int] = mapped_column(Integer, ForeignKey("objetivos.objetivo_id"))
    comida_id: Mapped[int] = mapped_column(Integer, ForeignKey("tipos_comida.tipo_comida_id"))
    fecha_creacion: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    metodo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("metodos_preparacion.metodo_id"), nullable=True
    )


class SeleccionIngrediente(Base):
    __tablename__ = "selecciones_ingredientes"

    seleccion_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    menu_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menus.menu_id", ondelete="CASCADE")
    )
    ingrediente_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ingredientes.ingrediente_id")
    )
    cantidad: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )

    ingrediente: Mapped[Ingrediente] = relationship(lazy="joined")

    @property
    def nombre_ingrediente(self) -> str | None:
        return self.ingrediente.nombre if self.ingrediente else None

    @property
    def calorias(self) -> float | None:
        return self.ingrediente.calorias if self.ingrediente else None


# ───────── schema / health helpers ───────────────────────────────────

async def create_tables() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database_health() -> bool:
    try:
        eng = await engine()
        async with eng.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        _LOG.exception("database health check failed")
        return False


# ───────── session helpers ───────────────────────────────────────────

async def _sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _SESSIONMAKER
    if _SESSIONMAKER is None:
        _SESSIONMAKER = async_sessionmaker(await engine(), expire_on_commit=False)
    return _SESSIONMAKER


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async_session = await _sessionmaker()
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Same session lifetime as `get_session`, for scripts."""
    async_session = await _sessionmaker()
    async with async_session() as session:
        yield session

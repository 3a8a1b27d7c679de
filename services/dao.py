"""
services/dao.py
────────────────────────────────────────────────────────────────────────
Per-entity data-access objects.

Every DAO wraps one request-scoped `AsyncSession`; each write commits its
own transaction and turns integrity violations into `ConflictError`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, delete, func, inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError
from services.auth import dummy_hash, hash_password, verify_password
from services.db import (
    Base,
    CategoriaIngrediente,
    Ingrediente,
    Menu,
    MetodoPreparacion,
    Objetivo,
    Receta,
    RecetaGuardada,
    RecetaIngrediente,
    SeleccionIngrediente,
    TipoComida,
    Usuario,
)

_LOG = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

DEFAULT_PAGE_SIZE = 10


def paginate(stmt, page: int | None, size: int = DEFAULT_PAGE_SIZE):
    """offset = (page-1)·size; no page means no limit."""
    if page is None:
        return stmt
    return stmt.offset((page - 1) * size).limit(size)


class BaseDAO:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @asynccontextmanager
    async def _writing(self, what: str) -> AsyncIterator[None]:
        try:
            yield
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            _LOG.warning("%s rejected by constraint: %s", what, exc.orig)
            raise ConflictError() from exc


class CrudDAO(BaseDAO, Generic[ModelT]):
    """create / read / update / delete / list / search for a single-key table."""

    model: type[ModelT]

    @property
    def _pk(self):
        return inspect(self.model).primary_key[0]

    async def create(self, **values: Any) -> int:
        row = self.model(**values)
        async with self._writing(f"insert into {self.model.__tablename__}"):
            self.db.add(row)
            await self.db.flush()
        ident = inspect(row).identity[0]
        _LOG.info("%s %s created", self.model.__tablename__, ident)
        return ident

    async def read(self, ident: int) -> ModelT | None:
        stmt = (
            select(self.model)
            .where(self._pk == ident)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def update(self, ident: int, **values: Any) -> bool:
        async with self._writing(f"update of {self.model.__tablename__} {ident}"):
            res = await self.db.execute(
                update(self.model).where(self._pk == ident).values(**values)
            )
        _LOG.info("%s %s updated: %d row(s)", self.model.__tablename__, ident, res.rowcount)
        return res.rowcount > 0

    async def delete(self, ident: int) -> bool:
        async with self._writing(f"delete from {self.model.__tablename__} {ident}"):
            res = await self.db.execute(delete(self.model).where(self._pk == ident))
        _LOG.info("%s %s deleted: %d row(s)", self.model.__tablename__, ident, res.rowcount)
        return res.rowcount > 0

    async def list(
        self,
        *criteria: ColumnElement[bool],
        page: int | None = None,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> Sequence[ModelT]:
        stmt = select(self.model).where(*criteria).order_by(self._pk)
        return (await self.db.execute(paginate(stmt, page, size))).scalars().all()

    async def search_by_name(
        self, query: str, page: int | None = None, size: int = DEFAULT_PAGE_SIZE
    ) -> Sequence[ModelT]:
        return await self.list(
            self.model.nombre.icontains(query, autoescape=True), page=page, size=size
        )


# ───────── users ─────────────────────────────────────────────────────


class UsuarioDAO(CrudDAO[Usuario]):
    model = Usuario

    async def create(self, **values: Any) -> int:
        plain = values.pop("contrasena", "") or ""
        # empty password = Google-only account
        values["contrasena"] = hash_password(plain) if plain else ""
        return await super().create(**values)

    async def update(self, ident: int, **values: Any) -> bool:
        plain = values.pop("contrasena", None)
        if plain:
            values["contrasena"] = hash_password(plain)
        return await super().update(ident, **values)

    async def find_by_email(self, email: str) -> Usuario | None:
        stmt = (
            select(Usuario)
            .where(func.lower(Usuario.email) == email.strip().lower())
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> Usuario | None:
        user = await self.find_by_email(email)
        # unknown emails and password-less accounts still pay one bcrypt check
        stored = user.contrasena if user is not None else ""
        matched = verify_password(password, stored or dummy_hash())
        if user is None or not stored or not matched:
            _LOG.info("login failed for %s", email)
            return None
        return user


# ───────── catalogue ────────────────────────────────────────────────


class CategoriaDAO(CrudDAO[CategoriaIngrediente]):
    model = CategoriaIngrediente


class IngredienteDAO(CrudDAO[Ingrediente]):
    model = Ingrediente

    async def by_categoria(
        self, categoria_id: int, page: int | None = None, size: int = DEFAULT_PAGE_SIZE
    ) -> Sequence[Ingrediente]:
        return await self.list(Ingrediente.categoria_id == categoria_id, page=page, size=size)


class MetodoDAO(CrudDAO[MetodoPreparacion]):
    model = MetodoPreparacion


class TipoComidaDAO(CrudDAO[TipoComida]):
    model = TipoComida


# ───────── recipes ───────────────────────────────────────────────────


class RecetaDAO(CrudDAO[Receta]):
    model = Receta

    async def by_tipo_comida(
        self, tipo_comida_id: int, page: int | None = None, size: int = DEFAULT_PAGE_SIZE
    ) -> Sequence[Receta]:
        return await self.list(Receta.tipo_comida_id == tipo_comida_id, page=page, size=size)


class RecetaGuardadaDAO(CrudDAO[RecetaGuardada]):
    model = RecetaGuardada


class RecetaIngredienteDAO(BaseDAO):
    """Composite-key association between recipes and ingredients."""

    def _key(self, receta_id: int, ingrediente_id: int):
        return (
            RecetaIngrediente.receta_id == receta_id,
            RecetaIngrediente.ingrediente_id == ingrediente_id,
        )

    async def create(self, **values: Any) -> tuple[int, int]:
        row = RecetaIngrediente(**values)
        async with self._writing("insert into receta_ingredientes"):
            self.db.add(row)
            await self.db.flush()
        _LOG.info("receta_ingredientes (%s, %s) created", row.receta_id, row.ingrediente_id)
        return row.receta_id, row.ingrediente_id

    async def read(self, receta_id: int, ingrediente_id: int) -> RecetaIngrediente | None:
        stmt = (
            select(RecetaIngrediente)
            .where(*self._key(receta_id, ingrediente_id))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def update(self, receta_id: int, ingrediente_id: int, **values: Any) -> bool:
        async with self._writing(f"update of receta_ingredientes ({receta_id}, {ingrediente_id})"):
            res = await self.db.execute(
                update(RecetaIngrediente)
                .where(*self._key(receta_id, ingrediente_id))
                .values(**values)
            )
        return res.rowcount > 0

    async def delete(self, receta_id: int, ingrediente_id: int) -> bool:
        async with self._writing(f"delete from receta_ingredientes ({receta_id}, {ingrediente_id})"):
            res = await self.db.execute(
                delete(RecetaIngrediente).where(*self._key(receta_id, ingrediente_id))
            )
        return res.rowcount > 0

    async def list(
        self,
        *criteria: ColumnElement[bool],
        page: int | None = None,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> Sequence[RecetaIngrediente]:
        stmt = (
            select(RecetaIngrediente)
            .where(*criteria)
            .order_by(RecetaIngrediente.receta_id, RecetaIngrediente.ingrediente_id)
        )
        return (await self.db.execute(paginate(stmt, page, size))).scalars().all()

    async def by_receta(self, receta_id: int) -> Sequence[RecetaIngrediente]:
        return await self.list(RecetaIngrediente.receta_id == receta_id)


# ───────── planning ──────────────────────────────────────────────────


class ObjetivoDAO(CrudDAO[Objetivo]):
    model = Objetivo

    async def shared(self) -> Sequence[Objetivo]:
        return await self.list(Objetivo.usuario_id.is_(None))


class MenuDAO(CrudDAO[Menu]):
    model = Menu


class SeleccionIngredienteDAO(CrudDAO[SeleccionIngrediente]):
    model = SeleccionIngrediente

    async def by_menu(self, menu_id: int) -> Sequence[SeleccionIngrediente]:
        return await self.list(SeleccionIngrediente.menu_id == menu_id)

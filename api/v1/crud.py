# api/v1/crud.py
"""
Generic CRUD router bound to one entity at registration time.

The input/output schemas are real annotations on the generated handlers,
so every route is validated and documented with its concrete types.
(No `from __future__ import annotations` here: FastAPI must see the
schema classes themselves, not strings.)
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import IdPath, current_user_id
from api.v1.schemas import ApiResponse
from api.v1.schemas.common import MAX_DB_INT
from services.dao import DEFAULT_PAGE_SIZE, CrudDAO
from services.db import get_session


def page_params(
    page: Optional[int] = Query(None, ge=1, le=MAX_DB_INT, description="1-based page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, description="rows per page"),
) -> dict:
    return {"page": page, "size": size}


def crud_router(
    *,
    dao: type[CrudDAO],
    schema_in: type[BaseModel],
    schema_out: type[BaseModel],
    label: str,
    feminine: bool = False,
    owner_field: str | None = None,
    shared_unowned: bool = False,
    router: APIRouter | None = None,
) -> APIRouter:
    """
    list / get / create / update / delete for `dao.model`.

    With `owner_field` the entity is owner-scoped: listings only show the
    caller's rows, new rows belong to the caller and only the owner may
    read or change a row.  `shared_unowned` additionally lets everyone
    read rows whose owner is NULL (still read-only).

    Pass `router` to extend a router that already carries entity-specific
    routes; those must be registered before the `/{ident}` routes.
    """
    router = router or APIRouter()
    o = "a" if feminine else "o"
    One = ApiResponse[schema_out]
    Many = ApiResponse[list[schema_out]]
    Deleted = ApiResponse[None]

    async def _found(repo: CrudDAO, ident: int):
        row = await repo.read(ident)
        if row is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"{label} no encontrad{o}")
        return row

    def _check_owner(row, caller: int, *, write: bool) -> None:
        if owner_field is None:
            return
        owner = getattr(row, owner_field)
        if owner == caller:
            return
        if owner is None and shared_unowned and not write:
            return
        raise HTTPException(
            status.HTTP_403_FORBIDDEN, f"No tienes permiso sobre est{o} {label.lower()}"
        )

    def _claim(values: dict, caller: int) -> dict:
        if owner_field is None:
            return values
        requested = values.get(owner_field)
        if requested not in (None, 0, caller):
            raise HTTPException(
                status.HTTP_403_FORBIDDEN,
                "No puedes asignar registros a otros usuarios",
            )
        values[owner_field] = caller
        return values

    # ───────────────────────── list ─────────────────────────────
    @router.get("", response_model=Many)
    async def list_rows(
        paging: dict = Depends(page_params),
        caller: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_session),
    ):
        repo = dao(db)
        criteria = []
        if owner_field is not None:
            column = getattr(repo.model, owner_field)
            mine = column == caller
            criteria.append(or_(mine, column.is_(None)) if shared_unowned else mine)
        rows = await repo.list(*criteria, **paging)
        return Many(data=[schema_out.model_validate(r) for r in rows])

    # ───────────────────────── fetch one ────────────────────────
    @router.get("/{ident}", response_model=One)
    async def read_row(
        ident: IdPath,
        caller: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_session),
    ):
        row = await _found(dao(db), ident)
        _check_owner(row, caller, write=False)
        return One(data=schema_out.model_validate(row))

    # ───────────────────────── create ───────────────────────────
    @router.post("", response_model=One, status_code=status.HTTP_201_CREATED)
    async def create_row(
        body: schema_in,
        caller: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_session),
    ):
        repo = dao(db)
        ident = await repo.create(**_claim(body.model_dump(), caller))
        row = await _found(repo, ident)
        return One(data=schema_out.model_validate(row), message=f"{label} cread{o} correctamente")

    # ───────────────────────── update ───────────────────────────
    @router.put("/{ident}", response_model=One)
    async def update_row(
        ident: IdPath,
        body: schema_in,
        caller: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_session),
    ):
        repo = dao(db)
        if owner_field is not None:
            _check_owner(await _found(repo, ident), caller, write=True)
        if not await repo.update(ident, **_claim(body.model_dump(), caller)):
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"{label} no encontrad{o}")
        row = await _found(repo, ident)
        return One(
            data=schema_out.model_validate(row),
            message=f"{label} actualizad{o} correctamente",
        )

    # ───────────────────────── delete ───────────────────────────
    @router.delete("/{ident}", response_model=Deleted)
    async def delete_row(
        ident: IdPath,
        caller: int = Depends(current_user_id),
        db: AsyncSession = Depends(get_session),
    ):
        repo = dao(db)
        if owner_field is not None:
            _check_owner(await _found(repo, ident), caller, write=True)
        if not await repo.delete(ident):
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"{label} no encontrad{o}")
        return Deleted(data=None, message=f"{label} eliminad{o} correctamente")

    return router

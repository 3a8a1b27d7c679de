"""
core/errors.py
────────────────────────────────────────────────────────────────────────
Error taxonomy for the API and the handlers that render every failure as
the `{"message": ..., "error": <code>}` envelope.

Clients only ever see a human-readable message plus a stable code; the
underlying exception text goes to the log.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

_LOG = logging.getLogger(__name__)

ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "internal_error",
    status.HTTP_503_SERVICE_UNAVAILABLE: "service_unavailable",
}


class ConflictError(Exception):
    """A write violated a uniqueness or foreign-key constraint."""

    def __init__(self, message: str = "El registro entra en conflicto con datos existentes"):
        super().__init__(message)
        self.message = message


def error_body(status_code: int, message: str) -> dict[str, str]:
    return {"message": message, "error": ERROR_CODES.get(status_code, "error")}


# ───────────────────────── handlers ─────────────────────────
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Error en la solicitud"
    return JSONResponse(
        error_body(exc.status_code, message),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    _LOG.info("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        error_body(status.HTTP_400_BAD_REQUEST, "Solicitud inválida"),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(
        error_body(status.HTTP_409_CONFLICT, exc.message),
        status_code=status.HTTP_409_CONFLICT,
    )


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    _LOG.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor"),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(Exception, _unexpected)

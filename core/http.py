"""
core/http.py
────────────────────────────────────────────────────────────────────────
HTTP middleware stack: CORS, gzip, default headers, caching headers.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from config import settings

DEFAULT_HEADERS = {"X-Application": "NutriPlan"}

# content-type ➜ max-age (seconds); everything else is left uncached
CACHE_MAX_AGE = {
    "text/css": 3600,
    "text/javascript": 3600,
    "application/javascript": 3600,
    "image/png": 86400,
    "image/jpeg": 86400,
}


async def _default_and_cache_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in DEFAULT_HEADERS.items():
        response.headers.setdefault(name, value)

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    max_age = CACHE_MAX_AGE.get(content_type)
    if max_age is not None and "cache-control" not in response.headers:
        response.headers["Cache-Control"] = f"max-age={max_age}"
    return response


def install_middleware(app: FastAPI) -> None:
    # wildcard origins cannot be combined with credentials
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-CSRF-Token"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.middleware("http")(_default_and_cache_headers)

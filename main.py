import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from api.v1.router import api_router
from config import settings
from core.errors import install_error_handlers
from core.http import install_middleware
from services.db import check_database_health, create_tables, dispose_engine
from services.identity import init_firebase

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOG = logging.getLogger("nutriplan")

BANNER = "API de NutriPlan - Sistema de Planificación Nutricional"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        await create_tables()
    app.state.identity_provider = init_firebase(settings.firebase_credentials)
    _LOG.info("NutriPlan API started (env=%s)", settings.env_name)
    yield
    await dispose_engine()
    _LOG.info("NutriPlan API stopped")


app = FastAPI(title="NutriPlan API", version="1.0.0", lifespan=lifespan)

install_middleware(app)
install_error_handlers(app)

app.include_router(api_router)


@app.get("/", response_class=PlainTextResponse, tags=["meta"])
def root() -> str:
    return BANNER


@app.get("/health", tags=["meta"])
async def health() -> dict[str, str]:
    database = "ok" if await check_database_health() else "unavailable"
    return {"status": "ok", "env": settings.env_name, "database": database}

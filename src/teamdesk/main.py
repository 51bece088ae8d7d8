import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.teamdesk.api.middlewares import setup_middlewares
from src.teamdesk.api.v1.router import api_router
from src.teamdesk.core.config import Settings, get_settings
from src.teamdesk.core.db import dispose_engine, get_session
from src.teamdesk.core.exceptions import setup_exception_handlers
from src.teamdesk.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

_metrics_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting service", app_name=settings.app_name, env=settings.app_env)

    yield

    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "members", "description": "Company roster, invitations and role management"},
    {"name": "invitations", "description": "Invitee-side accept and decline"},
    {"name": "membership-requests", "description": "Self-service join requests and their review"},
]


def _expose_metrics(app: FastAPI, settings: Settings) -> None:
    """Instrument the app and mount /metrics, key-protected when METRICS_API_KEY is set."""
    instrumentator = Instrumentator().instrument(app)
    expected = settings.metrics_api_key
    if not expected:
        instrumentator.expose(app, endpoint="/metrics")
        return

    async def require_metrics_key(api_key: str | None = Depends(_metrics_key_header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(require_metrics_key)])


async def _database_status() -> str:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check database query failed", error=str(e))
        return f"unhealthy: {e}"
    return "healthy"


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Company team membership and invitation API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)
    _expose_metrics(app, settings)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Report service health; 503 when the membership store is unreachable."""
        database = await _database_status()
        healthy = database == "healthy"
        return JSONResponse(
            content={"status": "healthy" if healthy else "unhealthy", "database": database},
            status_code=200 if healthy else 503,
        )

    return app


app = create_app()

"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.teamdesk.core.config import Settings

from .logging_context import logging_context_middleware

__all__ = [
    "logging_context_middleware",
    "setup_middlewares",
]

# Headers a browser client sends to the member endpoints
_ALLOWED_HEADERS = ["Content-Type", "X-Tenant-ID", "X-Actor-ID", "X-Request-ID"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install middlewares; the last one added is the outermost.

    Request flow: correlation id, then CORS, then log context.
    """

    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=_ALLOWED_HEADERS,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(CorrelationIdMiddleware)

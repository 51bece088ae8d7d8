"""structlog setup plus the request-scoped context every log line carries.

Context is bound in layers: the middleware binds request_id, the tenant
dependency binds tenant_id, the actor dependency binds actor_id.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


def _renderer(debug: bool) -> structlog.typing.Processor:
    if debug:
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging(debug: bool = False) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        debug: Colored console output when True, one JSON object per line otherwise.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            _renderer(debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_tenant_context(tenant_id: UUID) -> None:
    bind_contextvars(tenant_id=str(tenant_id))


def bind_actor_context(actor_id: UUID, tenant_id: UUID | None = None) -> None:
    """Bind the acting user, and the company when known."""
    bind_contextvars(actor_id=str(actor_id))
    if tenant_id is not None:
        bind_tenant_context(tenant_id)


def loggable_email(email: str) -> str | None:
    """Return the address only when LOG_USER_EMAILS allows it (GDPR)."""
    from src.teamdesk.core.config import get_settings

    return email if get_settings().log_user_emails else None


def clear_request_context() -> None:
    clear_contextvars()

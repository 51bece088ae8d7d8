"""Team membership errors and the handlers that render them with request_id."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.teamdesk.core.logging import get_logger

logger = get_logger(__name__)


class TeamError(Exception):
    """Base class for membership and invitation failures.

    Every subclass names the precondition that failed; ``code`` is stable
    for clients, ``status_code`` is what the HTTP layer answers with.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "team_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Forbidden(TeamError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class DuplicateInvitation(TeamError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_invitation"


class InvalidRole(TeamError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_role"


class InvalidInvitationState(TeamError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_invitation_state"


class NotFound(TeamError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class DirectoryUnavailable(TeamError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "directory_unavailable"


class DeliveryFailed(TeamError):
    """Notification could not be delivered.

    Normally caught by the invitation workflow and downgraded to a warning.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "delivery_failed"


def _error_response(status_code: int, detail: object, **extra: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, **extra, "request_id": correlation_id.get()},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Render every error as JSON carrying the request's correlation id."""

    @app.exception_handler(TeamError)
    async def team_error_handler(request: Request, exc: TeamError) -> JSONResponse:
        logger.info("Request rejected", code=exc.code, detail=exc.detail, path=request.url.path)
        return _error_response(exc.status_code, exc.detail, code=exc.code)

    # Also covers fastapi.HTTPException, a subclass
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        logger.info("Request validation failed", path=request.url.path, errors=len(errors))
        if any(error["loc"][-1:] == ["role"] for error in errors):
            return _error_response(
                InvalidRole.status_code, "Role must be admin or viewer", code=InvalidRole.code
            )
        return _error_response(InvalidRole.status_code, errors, code="validation_error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", exc_info=exc, path=request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

"""Domain error taxonomy and the single HTTP translation boundary.

Learn: Services and dependencies raise these typed errors; they never
build HTTP responses themselves. register_exception_handlers() installs
the handlers that turn every error (typed or not) into the standard
response envelope:

    {"success": false, "message": "...", "errors": [...], "data": null}
"""

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class AppError(Exception):
    """Base for all classified failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[list] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input, or an empty patch."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    """A uniqueness constraint would be violated."""

    status_code = 409
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    """Bad credentials or a missing/invalid/expired/revoked token.

    Messages stay deliberately vague so callers can't tell which.
    """

    status_code = 401
    default_message = "Invalid token"


class AuthorizationError(AppError):
    """Authenticated, but the role is not allowed to do this."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class DependencyError(AppError):
    """The store or the blob store failed unexpectedly.

    The message shown to callers is always the generic one; the cause
    is only logged.
    """

    status_code = 500
    default_message = "Internal server error"


def envelope(
    message: str,
    data: Any = None,
    *,
    success: bool = True,
    errors: Optional[list] = None,
) -> dict:
    """Build the standard response body."""
    return {
        "success": success,
        "message": message,
        "errors": errors or [],
        "data": data,
    }


def _error_response(status_code: int, message: str, errors: Optional[list] = None, headers=None):
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            envelope(message, None, success=False, errors=errors)
        ),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, DependencyError):
        # Never leak the cause to the caller
        logger.error("request.dependency_failed", path=request.url.path, error=exc.message)
        return _error_response(exc.status_code, DependencyError.default_message)
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.message, exc.errors, headers)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _error_response(400, "Validation failed", errors)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return _error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

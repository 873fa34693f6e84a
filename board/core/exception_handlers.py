"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses -> 400, 404, 429 or 500 depending on the subclass
- RequestValidationError -> 404 for unparseable path ids, 400 otherwise
- Unexpected Exception -> generic 500 (safety net)
- All responses include request_id for log correlation
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from board.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitAppError,
    StorageAppError,
    ValidationAppError,
)
from board.core.logging import get_request_id

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (ValidationAppError, 400),
    (NotFoundAppError, 404),
    (RateLimitAppError, 429),
    (StorageAppError, 500),
)


def _request_id(request: Request) -> str | None:
    """Request id from context, or from request state once the middleware cleared it."""
    return get_request_id() or getattr(request.state, "request_id", None)


def status_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code (400 when unmapped)."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    All responses carry ``error.code``, ``error.message`` and
    ``error.request_id``; ``error.details`` only when present. Rate-limited
    responses deliberately carry no Retry-After hint.
    """
    status_code = status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": _request_id(request),
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures in the standard error envelope.

    A path parameter that cannot be parsed (``/post/abc``) cannot name an
    existing post, so it is reported as 404 ``post_not_found``. Any other
    malformed input (form or query) is a 400.
    """
    errors = exc.errors()
    if any(error.get("loc", ())[:1] == ("path",) for error in errors):
        status_code, code, message = 404, "post_not_found", "Post not found"
    else:
        status_code, code, message = 400, "invalid_request", "Invalid form data"

    logger.warning(
        "request_validation_failed",
        extra={
            "error_code": code,
            "status_code": status_code,
            "request_path": request.url.path,
            "request_method": request.method,
            "error_count": len(errors),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "request_id": _request_id(request),
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure for debugging while returning a generic message; no
    stack traces or exception text reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": _request_id(request),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)

"""
Exception handlers translating errors into JSON responses.

Domain errors keep their message; anything unexpected becomes a generic 500
so storage internals never reach the client.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventplanner.core.exceptions import BookingDomainError
from eventplanner.core.logging import get_logger

logger = get_logger(__name__)


def _field_name(location: tuple) -> str:
    # ("body", "quantity") -> "quantity"; ("query", "page") -> "page"
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or ".".join(str(part) for part in location)


async def domain_error_handler(request: Request, exc: BookingDomainError) -> JSONResponse:
    logger.warning(
        "booking_request_rejected",
        error=exc.error_code,
        detail=exc.message,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Authentication failures and routing errors, in the same body shape as domain errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"), "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    logger.info("request_validation_failed", errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "validation_error", "detail": "Invalid request", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "detail": "Internal server error"},
    )


EXCEPTION_HANDLERS = {
    BookingDomainError: domain_error_handler,
    StarletteHTTPException: http_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

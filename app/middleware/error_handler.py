"""Error handling middleware."""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = structlog.get_logger()


def _error_body(request: Request, error: str, message: str) -> dict:
    return {
        "error": error,
        "message": message,
        "path": str(request.url),
    }


def _field_name(loc: tuple | list) -> str:
    """Dotted field path without the request-part prefix."""
    parts = [str(part) for part in loc]
    if parts and parts[0] in {"body", "query", "path", "header", "cookie"}:
        parts = parts[1:]
    return ".".join(parts) or "request"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Args:
        request: Request object
        exc: Application exception

    Returns:
        JSON error response
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.__class__.__name__, exc.message),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions raised by FastAPI or Starlette."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, "HTTPException", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle validation errors.

    Field errors are aggregated into a ``field -> message`` map; when a field
    has several problems the first one wins.

    Returns:
        400 JSON error response with validation details
    """
    details: dict[str, str] = {}
    for error in exc.errors():
        details.setdefault(_field_name(error.get("loc", ())), error.get("msg", "Invalid value"))

    logger.info("request_validation_failed", path=request.url.path, fields=list(details))

    content = _error_body(request, "ValidationError", "Request validation failed")
    content["details"] = details
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    The exception text is returned to the client and therefore leaks
    internals.
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request,
            "InternalServerError",
            f"An unexpected error occurred: {exc}",
        ),
    )

"""Exception handlers mapping pipeline errors to JSON responses."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from ..errors import ReadItOutError

logger = structlog.get_logger()


async def readitout_exception_handler(request: Request, exc: ReadItOutError) -> JSONResponse:
    """Render a ``ReadItOutError`` as ``{"error": message}`` with its status code."""
    logger.error(
        f"{exc.status_code} {request.method} {request.url.path}: {exc.message}",
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.error(f"400 {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"500 {request.method} {request.url.path}: Unexpected error: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )

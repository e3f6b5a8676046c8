"""
Exception handlers translating service errors into JSON responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from vanity_queue.errors import (
    GeneratorError,
    InvalidInput,
    JobNotFound,
    QueueFull,
    VanityQueueError,
)
from vanity_queue.types.api import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[VanityQueueError], int]] = [
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (QueueFull, status.HTTP_429_TOO_MANY_REQUESTS),
    (JobNotFound, status.HTTP_404_NOT_FOUND),
    (GeneratorError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: VanityQueueError) -> int:
    """HTTP status code for a service error."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error(code: int, error: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the service's exception handlers on the app."""

    @app.exception_handler(VanityQueueError)
    async def service_error_handler(request: Request, exc: VanityQueueError):
        code = status_for(exc)
        log = logger.error if code >= 500 else logger.info
        log(
            "Request rejected",
            extra={
                "path": request.url.path,
                "status": code,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
        return _error(code, str(exc))

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return _error(exc.status_code, str(exc.detail) if exc.detail else "HTTP error")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "errors": str(exc.errors())},
        )
        return _error(
            422,
            "Validation error",
            detail=str(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

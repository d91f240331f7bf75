"""
Translation of service errors into HTTP responses.

Handlers never leak internal details: validation failures list the
rejected fields, missing resources return their entity name, and
anything else becomes a generic 500 whose cause is only logged.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from song_rodeo_api.app.core.errors import (
    NotFoundError,
    StorageError,
    ValidationError,
    field_errors,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [e.as_dict() for e in field_errors(exc.errors())]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [e.as_dict() for e in exc.errors]},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    # The cause was logged where it was caught; keep it out of the response.
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": INTERNAL_ERROR}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # The server middleware re-raises after this handler and logs the traceback.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": INTERNAL_ERROR}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy handlers to ``app``."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

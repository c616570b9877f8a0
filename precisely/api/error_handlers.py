"""Error Handlers — global exception handlers for the document API.

Invariants:
    - PreciselyError → its http_status with {"error": message}
    - RequestValidationError → 400 "illegal structure of json object"
    - Exception (catch-all) → 500 "unexpected server state", never leaks internals
    - Each error is logged once here: 4xx at WARNING, 5xx at ERROR

Design Decisions:
    - Three-layer handler: domain (PreciselyError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the app module about wiring only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from precisely.api.responses import IndentedJSONResponse
from precisely.core.errors import (
    InvariantViolationError, MalformedBodyError, PreciselyError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_precisely_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_precisely_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(PreciselyError)
    async def precisely_error_handler(request: Request, exc: PreciselyError):
        """Handle all document service errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        message = f"{type(exc).__name__}: {exc.message}"
        if exc.context.debug_info:
            message = f"{message} {exc.context.debug_info}"
        logger.log(
            level, message,
            extra={**exc.log_extra(), "path": request.url.path},
        )
        return IndentedJSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Malformed or mistyped JSON body."""
        error = MalformedBodyError()
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": error.code, "path": request.url.path},
        )
        return IndentedJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return IndentedJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InvariantViolationError(str(exc)).to_response(),
        )

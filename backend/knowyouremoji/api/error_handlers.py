"""Error Handlers: global exception handlers for the KnowYourEmoji API.

Invariants:
    - KnowYourEmojiError -> structured JSON with code, message, severity, at
      the error's own http_status
    - RequestValidationError -> 400 with the same field_errors envelope that
      RequestValidationFailed produces
    - Exception (catch-all) -> never leaks internal details
    - Configuration and upstream errors log the detailed message and return
      only the public one

Design Decisions:
    - Three-layer handler: domain (KnowYourEmojiError), validation (Pydantic),
      catch-all (Exception)
    - Extracted from main.py to keep the app module to wiring only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from knowyouremoji.core.errors import (
    ErrorSeverity,
    KnowYourEmojiError,
    RequestValidationFailed,
)
from knowyouremoji.services.request_normalizer import (
    field_errors_from,
    validation_summary,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(KnowYourEmojiError)
    async def domain_error_handler(request: Request, exc: KnowYourEmojiError):
        """Handle all KnowYourEmoji domain/infrastructure errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        headers = None
        if exc.context.retry_after_ms:
            headers = {"Retry-After": str(max(1, exc.context.retry_after_ms // 1000))}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors with a field-scoped envelope."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def build_validation_error_response(exc: RequestValidationError) -> dict:
    field_errors = field_errors_from(list(exc.errors()))
    failure = RequestValidationFailed(
        validation_summary(field_errors), field_errors=field_errors,
    )
    return failure.to_response()

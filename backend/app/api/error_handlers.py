"""Error Handlers — global exception handlers and the outcome → HTTP status table.

Invariants:
    - PortfolioError → structured JSON with error code, message, severity
    - Status codes decided here from Outcome, never inside core/services
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → never leaks internal details
    - TRANSIENT responses carry Retry-After

Design Decisions:
    - Three-layer handler: domain (PortfolioError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py (ADR: ExMA import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.domain_types import Outcome
from app.core.errors import ErrorSeverity, PortfolioError

logger = logging.getLogger(__name__)

_HTTP_STATUS_BY_OUTCOME = {
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.DUPLICATE_KEY: status.HTTP_409_CONFLICT,
    Outcome.CONFLICT: status.HTTP_409_CONFLICT,
    Outcome.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_status_for(exc: PortfolioError) -> int:
    """HTTP status for a domain error; anything without an Outcome is a 500."""
    if exc.outcome is not None:
        return _HTTP_STATUS_BY_OUTCOME[exc.outcome]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_portfolio_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_portfolio_error_handler(app: FastAPI) -> None:
    """Register catalog domain/infrastructure error handler."""

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError):
        """Handle all catalog domain/infrastructure errors."""
        status_code = http_status_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            f"PortfolioError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        headers = None
        if exc.context.retry_after_ms:
            # Retry-After is whole seconds
            headers = {"Retry-After": str(max(1, exc.context.retry_after_ms // 1000))}
        return JSONResponse(
            status_code=status_code, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc.errors()),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
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


def build_validation_error_response(errors: list) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }

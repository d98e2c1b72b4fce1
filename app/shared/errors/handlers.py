"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema; ``error`` is the
user-visible message the review surface displays as-is.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.qualitative.errors import (
    AdminAuthError,
    FilingUnavailableError,
    InvalidTickerError,
    MissingOverrideFieldsError,
    NoSegmentsAvailableError,
    OverrideStoreError,
    QualitativeDomainError,
    ScreeningFetchError,
    ScreeningPayloadError,
    TickerNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(InvalidTickerError)
    async def handle_invalid_ticker(
        _request: Request, exc: InvalidTickerError
    ) -> JSONResponse:
        """Handle empty or malformed ticker errors."""
        logger.warning("Invalid ticker: %r", exc.ticker)
        return _error_response(HTTP_422, "Ticker is required")

    @app.exception_handler(MissingOverrideFieldsError)
    async def handle_missing_fields(
        _request: Request, exc: MissingOverrideFieldsError
    ) -> JSONResponse:
        """Handle override submissions without ticker or segments."""
        logger.warning("Rejected override: %s", exc.message)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(NoSegmentsAvailableError)
    async def handle_no_segments(
        _request: Request, exc: NoSegmentsAvailableError
    ) -> JSONResponse:
        """Handle lock requests for tickers with an empty breakdown."""
        logger.warning("No segments to lock for %s", exc.ticker)
        return _error_response(HTTP_422, exc.message)

    @app.exception_handler(ScreeningFetchError)
    async def handle_screening_fetch(
        _request: Request, exc: ScreeningFetchError
    ) -> JSONResponse:
        """Handle screening endpoint failures."""
        logger.error("Screening fetch failed for %s: %s", exc.ticker, exc.reason)
        return _error_response(HTTP_502, exc.message)

    @app.exception_handler(ScreeningPayloadError)
    async def handle_screening_payload(
        _request: Request, exc: ScreeningPayloadError
    ) -> JSONResponse:
        """Handle screening responses that fail schema validation."""
        logger.error("Malformed screening payload for %s at %s", exc.ticker, exc.location)
        return _error_response(HTTP_502, "Malformed screening data", exc.location)

    @app.exception_handler(OverrideStoreError)
    async def handle_override_store(
        _request: Request, exc: OverrideStoreError
    ) -> JSONResponse:
        """Handle persistence failures; the storage message is user-visible."""
        logger.error("Override store error: %s", exc.reason)
        return _error_response(HTTP_500, exc.message)

    @app.exception_handler(TickerNotFoundError)
    async def handle_ticker_not_found(
        _request: Request, exc: TickerNotFoundError
    ) -> JSONResponse:
        """Handle tickers unknown to the filing source."""
        logger.warning("Ticker not found: %s", exc.ticker)
        return _error_response(HTTP_404, "Stock not found")

    @app.exception_handler(FilingUnavailableError)
    async def handle_filing_unavailable(
        _request: Request, exc: FilingUnavailableError
    ) -> JSONResponse:
        """Handle missing annual filings."""
        logger.warning("Filing unavailable for %s: %s", exc.ticker, exc.reason)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(AdminAuthError)
    async def handle_admin_auth(
        _request: Request, exc: AdminAuthError
    ) -> JSONResponse:
        """Handle missing or invalid admin sessions."""
        return _error_response(HTTP_401, exc.message)

    @app.exception_handler(QualitativeDomainError)
    async def handle_qualitative_domain(
        _request: Request, exc: QualitativeDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled qualitative domain errors."""
        logger.error("Unhandled qualitative domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")

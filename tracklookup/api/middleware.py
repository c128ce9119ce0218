"""API middleware: CORS, request logging, and error handling.

Starlette middleware is a stack (last added, first executed).  ``main.py``
adds ErrorHandlingMiddleware first and RequestLoggingMiddleware second, so
the request log sees the final status code after an error was converted
into a JSON body.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from tracklookup.api.schemas import ErrorResponse
from tracklookup.utils.errors import (
    ChallengeRequiredError,
    ConfigurationError,
    InvalidLookupKindError,
    InvalidTokenError,
    RateLimitError,
    TrackLookupError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from tracklookup.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[TrackLookupError], int], ...] = (
    (InvalidLookupKindError, 404),
    (UpstreamNotFoundError, 404),
    (RateLimitError, 429),
    (InvalidTokenError, 401),
    (ChallengeRequiredError, 403),
    (UpstreamUnavailableError, 503),
    (UpstreamError, 502),
    (ConfigurationError, 500),
)


def status_for(exc: TrackLookupError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]``.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert ``TrackLookupError`` subclasses into structured JSON errors.

    Upstream errors keep their upstream code; a challenge-required error also
    carries the challenge sid and image so the client can solve it and
    retry with ``captcha_sid``/``captcha_key``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except TrackLookupError as exc:
            status = status_for(exc)
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=status,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
                error_code=getattr(exc, "error_code", None),
                challenge_sid=getattr(exc, "challenge_sid", None),
                challenge_image_url=getattr(exc, "challenge_image_url", None),
            )
            return JSONResponse(status_code=status, content=body.model_dump())

"""tracklookup API layer: routes, schemas, and middleware."""

from tracklookup.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from tracklookup.api.routes import router
from tracklookup.api.schemas import ErrorResponse, HealthResponse, LookupResponse

__all__ = [
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "LookupResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
]

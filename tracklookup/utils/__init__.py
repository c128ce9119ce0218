"""Utility modules for tracklookup.

- **errors** -- Domain-specific exception hierarchy rooted at TrackLookupError;
  upstream failures are split by cause so callers can react to rate limits,
  rejected tokens and anti-bot challenges separately.
- **concurrency** -- asyncio semaphore throttling for the multi-album fan-out.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Query normalization and prefix-tag stripping.
"""

from tracklookup.utils.concurrency import throttled_gather
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
from tracklookup.utils.logging import configure_logging, get_logger
from tracklookup.utils.text_normalizer import normalize_query, strip_prefix

__all__ = [
    "ChallengeRequiredError",
    "ConfigurationError",
    "InvalidLookupKindError",
    "InvalidTokenError",
    "RateLimitError",
    "TrackLookupError",
    "UpstreamError",
    "UpstreamNotFoundError",
    "UpstreamUnavailableError",
    "configure_logging",
    "get_logger",
    "normalize_query",
    "strip_prefix",
    "throttled_gather",
]

"""Custom exception hierarchy for tracklookup.

All application exceptions inherit from :class:`TrackLookupError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream (e.g. "vk") caused the failure.

The hierarchy is organized by where the failure originates:

    TrackLookupError  (base -- catch-all for any tracklookup error)
    +-- InvalidLookupKindError    (caller asked for an unsupported lookup kind)
    +-- ConfigurationError        (startup / missing config, bad token index)
    +-- UpstreamError             (the catalog API reported a failure)
        +-- RateLimitError            (too many requests / flood control)
        +-- InvalidTokenError         (access token rejected)
        +-- UpstreamNotFoundError     (entity missing or access denied)
        +-- ChallengeRequiredError    (anti-bot challenge must be solved)
        +-- UpstreamUnavailableError  (transport failure, unparseable body)

Upstream errors are never cached and never retried inside the lookup layer;
retry and token rotation belong to the caller.
"""

from __future__ import annotations


class TrackLookupError(Exception):
    """Base exception for all tracklookup errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[vk] Too many requests per second``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Contract / configuration errors
# ---------------------------------------------------------------------------

class InvalidLookupKindError(TrackLookupError):
    """Raised before any I/O when an operation receives a lookup kind it does not serve."""

    def __init__(
        self,
        message: str = "Unsupported lookup kind",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(TrackLookupError):
    """Raised when configuration is invalid or missing (e.g. no access tokens)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------

class UpstreamError(TrackLookupError):
    """Raised when the catalog API response carries an error indicator.

    ``error_code`` is the upstream's numeric code when one was reported.
    """

    def __init__(
        self,
        message: str = "Upstream catalog request failed",
        provider_name: str | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._error_code = error_code

    @property
    def error_code(self) -> int | None:
        return self._error_code


class RateLimitError(UpstreamError):
    """Raised when the upstream rejects a request for exceeding its rate limit."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, error_code=error_code)


class InvalidTokenError(UpstreamError):
    """Raised when the access token used for a request is rejected."""

    def __init__(
        self,
        message: str = "Access token rejected",
        provider_name: str | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, error_code=error_code)


class UpstreamNotFoundError(UpstreamError):
    """Raised when the requested entity does not exist or is not accessible."""

    def __init__(
        self,
        message: str = "Requested entity not found",
        provider_name: str | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, error_code=error_code)


class ChallengeRequiredError(UpstreamError):
    """Raised when the upstream demands an anti-bot challenge be solved.

    ``challenge_sid`` and ``challenge_image_url`` are passed through to the
    caller so the challenge subsystem can solve it and resubmit the request
    with the answer in its challenge parameters.
    """

    def __init__(
        self,
        message: str = "Anti-bot challenge required",
        provider_name: str | None = None,
        error_code: int | None = None,
        challenge_sid: str | None = None,
        challenge_image_url: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, error_code=error_code)
        self._challenge_sid = challenge_sid
        self._challenge_image_url = challenge_image_url

    @property
    def challenge_sid(self) -> str | None:
        return self._challenge_sid

    @property
    def challenge_image_url(self) -> str | None:
        return self._challenge_image_url


class UpstreamUnavailableError(UpstreamError):
    """Raised when the upstream cannot be reached or returns an unparseable body."""

    def __init__(
        self,
        message: str = "Upstream catalog is unavailable",
        provider_name: str | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, error_code=error_code)

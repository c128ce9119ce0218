"""Per-request lookup context and the access-token pool it selects from.

The catalog API authenticates every call with an access token.  Several
accounts are configured; the request layer picks one by index (e.g. to
spread load) and the lookup engine resolves that index against the pool
it was constructed with.  Anti-bot challenge parameters ride along in the
same context and are merged into upstream query strings verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from tracklookup.utils.errors import ConfigurationError


@dataclass(frozen=True)
class CredentialPool:
    """Ordered, immutable collection of upstream access tokens."""

    tokens: tuple[str, ...] = ()

    @classmethod
    def from_csv(cls, raw: str) -> CredentialPool:
        """Build a pool from a comma-separated token string, skipping blanks."""
        return cls(tokens=tuple(t.strip() for t in raw.split(",") if t.strip()))

    def token(self, index: int) -> str:
        """Return the token at *index*.

        Raises
        ------
        ConfigurationError
            If the pool is empty or *index* is out of range.
        """
        if not self.tokens:
            raise ConfigurationError(message="No access tokens configured (set AUTH_TOKENS)")
        if index < 0 or index >= len(self.tokens):
            raise ConfigurationError(
                message=f"Account index {index} out of range (pool has {len(self.tokens)} tokens)"
            )
        return self.tokens[index]

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class LookupContext:
    """Request-scoped inputs that are not part of the logical query.

    Attributes
    ----------
    token_index:
        Index into the :class:`CredentialPool` for this request.
    challenge_params:
        Opaque anti-bot challenge parameters (e.g. a solved captcha sid and
        key).  Merged into every upstream query string uninterpreted and
        never part of the cache key.
    """

    token_index: int = 0
    challenge_params: Mapping[str, str] = field(default_factory=dict)

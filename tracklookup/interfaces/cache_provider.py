"""Abstract base class for cache service providers.

Defines the key-value contract the lookup engine uses to remember
normalized upstream results.  Implementations may use an in-memory TTL map,
Redis, or any other storage backend; the engine never knows which.

Entries expire by age only.  There is deliberately no delete operation:
once a key is written it is either served unchanged or ages out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store.  Callers store immutable values (tuples of
            frozen models) so readers can share them safely.
        ttl:
            Time-to-live in seconds.  ``None`` means the provider default.
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

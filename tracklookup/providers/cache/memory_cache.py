"""In-memory cache provider using cachetools.TTLCache.

Suitable for single-process deployments.  Can be swapped for Redis or
another backend via the ICacheProvider interface.
"""

from __future__ import annotations

import time
from typing import Any, Callable

import structlog
from cachetools import TTLCache

from tracklookup.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL cache backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Time-to-live in seconds for cache entries.
    timer:
        Clock used to age entries; tests inject a fake one.
    """

    def __init__(
        self,
        max_size: int = 10000,
        ttl: int = 86400,
        timer: Callable[[], float] | None = None,
    ) -> None:
        self._default_ttl = ttl
        self._cache: TTLCache[str, Any] = TTLCache(
            maxsize=max_size, ttl=ttl, timer=timer or time.monotonic
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        value = self._cache.get(key)
        if value is not None:
            logger.debug("cache_hit", key=key)
        else:
            logger.debug("cache_miss", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key*.

        The per-item *ttl* is ignored: ``TTLCache`` applies the uniform TTL
        set at construction time.
        """
        self._cache[key] = value
        logger.debug("cache_set", key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

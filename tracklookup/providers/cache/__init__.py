"""Cache providers.

MemoryCacheProvider keeps normalized lookup results for the configured TTL
so repeated searches within that window cost a single upstream call.  It is
not shared across processes; for multi-worker deployments, swap in a Redis
adapter implementing ICacheProvider without changing any lookup logic.
"""

from tracklookup.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]

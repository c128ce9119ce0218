"""Public interface definitions for external collaborators.

The lookup engine talks to the cache and the upstream catalog only through
the abstract base classes here.  Concrete adapters live in
``tracklookup/providers/`` and are injected in ``tracklookup/main.py``:

    Interface        →  Concrete implementation
    ─────────────────────────────────────────────
    ICacheProvider   →  MemoryCacheProvider
    ICatalogClient   →  VKCatalogClient
"""

from tracklookup.interfaces.cache_provider import ICacheProvider
from tracklookup.interfaces.catalog_client import ICatalogClient

__all__ = [
    "ICacheProvider",
    "ICatalogClient",
]

"""Upstream catalog client implementations.

VKCatalogClient is the only implementation: it speaks VK's ``audio.*``
methods over an injected ``httpx.AsyncClient``.
"""

from tracklookup.providers.catalog.vk_catalog_client import VKCatalogClient

__all__ = ["VKCatalogClient"]

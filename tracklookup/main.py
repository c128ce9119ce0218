"""tracklookup FastAPI application entry point.

Wires the cache, upstream catalog client, lookup engine and aggregation
service together via dependency injection, configures structured logging,
and exposes the ``/api/v1`` routes.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from tracklookup.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from tracklookup.api.routes import router as api_router
from tracklookup.config.loader import load_config
from tracklookup.config.settings import Settings
from tracklookup.providers.cache.memory_cache import MemoryCacheProvider
from tracklookup.providers.catalog.vk_catalog_client import VKCatalogClient
from tracklookup.services.aggregation_service import AggregationService
from tracklookup.services.lookup_engine import EntityLookupEngine
from tracklookup.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=app_settings.catalog_timeout)
    credentials = app_settings.credential_pool()

    cache = MemoryCacheProvider(
        max_size=app_settings.cache_max_size,
        ttl=app_settings.cache_ttl_seconds,
    )
    catalog_client = VKCatalogClient(http_client=http_client, settings=app_settings)

    lookup_engine = EntityLookupEngine(
        catalog_client=catalog_client,
        cache=cache,
        credentials=credentials,
        page_size=app_settings.page_size,
        album_track_count=app_settings.album_track_count,
    )
    aggregation_service = AggregationService(
        engine=lookup_engine,
        max_albums_limit=app_settings.max_albums_limit,
        max_concurrent_lookups=app_settings.max_concurrent_lookups,
    )

    return {
        "http_client": http_client,
        "credentials": credentials,
        "cache": cache,
        "catalog_client": catalog_client,
        "lookup_engine": lookup_engine,
        "aggregation_service": aggregation_service,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    config = load_config(settings=settings)
    _logger.info(
        "app_startup",
        version=config.get("app", {}).get("version", "0.1.0"),
        environment=settings.app_env,
        provider=components["catalog_client"].get_provider_name(),
        accounts=len(components["credentials"]),
    )
    if not components["credentials"].tokens:
        _logger.warning("no_access_tokens", hint="set AUTH_TOKENS; cache misses will fail")

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="tracklookup API",
        version="0.1.0",
        description=(
            "Cached search and lookup of tracks, albums and artists from an "
            "upstream music catalog, including compound artist/album queries."
        ),
        lifespan=_lifespan,
    )

    # Order matters: last added = first executed.
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "tracklookup.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )

"""Shared pytest fixtures for the tracklookup test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tracklookup.interfaces.catalog_client import ICatalogClient
from tracklookup.models.credentials import CredentialPool, LookupContext
from tracklookup.providers.cache.memory_cache import MemoryCacheProvider
from tracklookup.services.aggregation_service import AggregationService
from tracklookup.services.lookup_engine import EntityLookupEngine

# ---------------------------------------------------------------------------
# Raw upstream payload builders
# ---------------------------------------------------------------------------


def vk_response(items: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap *items* the way the catalog API does."""
    return {"response": {"count": len(items), "items": items}}


def vk_error(code: int, message: str = "error", **extra: Any) -> dict[str, Any]:
    return {"error": {"error_code": code, "error_msg": message, **extra}}


def raw_track(track_id: int, owner_id: int = 100, title: str | None = None) -> dict[str, Any]:
    return {
        "id": track_id,
        "owner_id": owner_id,
        "artist": "Boards of Canada",
        "title": title or f"Track {track_id}",
        "duration": 240,
        "url": f"https://cdn.example/{owner_id}_{track_id}.mp3",
        "access_key": f"ak{track_id}",
    }


def raw_album(album_id: int, plays: int, owner_id: int = -1, access_key: str = "key") -> dict[str, Any]:
    return {
        "id": album_id,
        "owner_id": owner_id,
        "title": f"Album {album_id}",
        "access_key": f"{access_key}{album_id}",
        "plays": plays,
        "count": 2,
        "year": 1998,
        "main_artists": [{"name": "Boards of Canada"}],
        "photo": {"photo_135": "https://img.example/135.jpg", "photo_600": "https://img.example/600.jpg"},
    }


def raw_artist(artist_id: str, name: str = "Boards of Canada") -> dict[str, Any]:
    return {
        "id": artist_id,
        "name": name,
        "domain": name.lower().replace(" ", ""),
        "photo": [
            {"url": "https://img.example/a-small.jpg", "width": 50},
            {"url": "https://img.example/a-big.jpg", "width": 600},
        ],
    }


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog_client() -> MagicMock:
    """Upstream client mock; each test sets the return values it needs."""
    client = MagicMock(spec=ICatalogClient)
    client.search = AsyncMock(return_value=vk_response([]))
    client.list_by_artist = AsyncMock(return_value=vk_response([]))
    client.get_album = AsyncMock(return_value=vk_response([]))
    client.get_provider_name.return_value = "vk"
    return client


@pytest.fixture
def cache() -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, ttl=3600)


@pytest.fixture
def credentials() -> CredentialPool:
    return CredentialPool(tokens=("token-a", "token-b"))


@pytest.fixture
def context() -> LookupContext:
    return LookupContext(token_index=0, challenge_params={"captcha_sid": "sid", "captcha_key": "abc"})


@pytest.fixture
def engine(
    catalog_client: MagicMock,
    cache: MemoryCacheProvider,
    credentials: CredentialPool,
) -> EntityLookupEngine:
    return EntityLookupEngine(
        catalog_client=catalog_client,
        cache=cache,
        credentials=credentials,
        page_size=50,
        album_track_count=200,
    )


@pytest.fixture
def aggregation(engine: EntityLookupEngine) -> AggregationService:
    return AggregationService(engine=engine, max_albums_limit=10, max_concurrent_lookups=5)

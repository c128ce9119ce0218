"""Unit tests for MemoryCacheProvider."""

from __future__ import annotations

import pytest

from tracklookup.models.items import Track
from tracklookup.providers.cache.memory_cache import MemoryCacheProvider


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestMemoryCacheProvider:
    @pytest.fixture()
    def cache(self) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=3600)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        result = await cache.get("nonexistent")
        assert result is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", ("value1",))
        result = await cache.get("key1")
        assert result == ("value1",)

    @pytest.mark.asyncio
    async def test_empty_tuple_is_a_hit_not_a_miss(self, cache: MemoryCacheProvider) -> None:
        await cache.set("albums.empty", ())
        assert await cache.get("albums.empty") == ()
        assert await cache.exists("albums.empty") is True

    @pytest.mark.asyncio
    async def test_exists_returns_false_for_missing_key(self, cache: MemoryCacheProvider) -> None:
        assert await cache.exists("missing") is False

    @pytest.mark.asyncio
    async def test_stores_frozen_items(self, cache: MemoryCacheProvider) -> None:
        items = (Track(id=1, owner_id=2, title="Roygbiv", artist="Boards of Canada"),)
        await cache.set("audiosByArtist.x", items)
        result = await cache.get("audiosByArtist.x")
        assert result == items
        assert result[0].title == "Roygbiv"

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self) -> None:
        clock = _FakeClock()
        cache = MemoryCacheProvider(max_size=10, ttl=60, timer=clock)
        await cache.set("k", ("v",))

        clock.now = 59.0
        assert await cache.get("k") == ("v",)

        clock.now = 61.0
        assert await cache.get("k") is None
        assert await cache.exists("k") is False

    @pytest.mark.asyncio
    async def test_max_size_evicts_oldest(self) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=3600)
        await cache.set("a", (1,))
        await cache.set("b", (2,))
        await cache.set("c", (3,))
        assert len(cache) == 2
        assert await cache.get("c") == (3,)

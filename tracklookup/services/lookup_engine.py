"""Cache-aside lookup engine for searches, artist listings and albums.

Every public operation follows the same path:

    derive cache key → cache hit? return it
                     → miss: call upstream → check error → normalize
                             → cache → return

Upstream errors raise out of the normalizer before the cache write, so a
failure is never cached and the next identical request goes upstream again.
Nothing here retries; retry and token rotation belong to the caller.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import structlog

from tracklookup.interfaces.cache_provider import ICacheProvider
from tracklookup.interfaces.catalog_client import ICatalogClient
from tracklookup.models.credentials import CredentialPool, LookupContext
from tracklookup.models.items import (
    ARTIST_KINDS,
    SEARCH_KINDS,
    LookupKind,
    LookupResult,
    ResultKind,
)
from tracklookup.models.query import Query
from tracklookup.services import cache_keys
from tracklookup.services.result_normalizer import ResultNormalizer
from tracklookup.utils.errors import InvalidLookupKindError
from tracklookup.utils.logging import get_logger

_RESULT_KINDS = {
    LookupKind.ALBUMS: ResultKind.ALBUMS,
    LookupKind.ARTISTS: ResultKind.ARTISTS,
    LookupKind.ARTIST_TRACKS: ResultKind.AUDIOS,
    LookupKind.ARTIST_ALBUMS: ResultKind.ALBUMS,
    LookupKind.ALBUM_BY_ID: ResultKind.AUDIOS,
}


def _coerce_kind(kind: LookupKind | str, allowed: frozenset[LookupKind], label: str) -> LookupKind:
    """Return *kind* as a :class:`LookupKind` if it is in *allowed*, else raise."""
    try:
        coerced = LookupKind(kind)
    except ValueError:
        coerced = None
    if coerced not in allowed:
        name = getattr(kind, "value", kind)
        raise InvalidLookupKindError(message=f"'{name}' is not a {label} kind")
    return coerced


class EntityLookupEngine:
    """Serves lookups from cache, falling back to the upstream catalog.

    Parameters
    ----------
    catalog_client:
        Upstream transport adapter.
    cache:
        Shared key-value store for normalized results.  Entries live for
        the cache's own TTL; the engine never sets one per write.
    credentials:
        Access-token pool; each request's :class:`LookupContext` selects
        one by index.
    normalizer:
        Converts raw bodies to items; defaults to one named after the client.
    page_size:
        Items per page for searches and artist listings.
    album_track_count:
        Upper bound on tracks fetched for one album (albums are not paginated).
    """

    def __init__(
        self,
        catalog_client: ICatalogClient,
        cache: ICacheProvider,
        credentials: CredentialPool,
        normalizer: ResultNormalizer | None = None,
        page_size: int = 50,
        album_track_count: int = 200,
    ) -> None:
        self._client = catalog_client
        self._cache = cache
        self._credentials = credentials
        self._normalizer = normalizer or ResultNormalizer(catalog_client.get_provider_name())
        self._page_size = page_size
        self._album_track_count = album_track_count
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public lookups
    # ------------------------------------------------------------------

    async def search(
        self,
        query: Query,
        kind: LookupKind | str,
        context: LookupContext | None = None,
    ) -> LookupResult:
        """Search albums or artists by free text, one page at a time.

        Raises
        ------
        InvalidLookupKindError
            If *kind* is not a search kind.  Raised before any I/O.
        UpstreamError
            If the upstream reports a failure; nothing is cached.
        """
        kind = _coerce_kind(kind, SEARCH_KINDS, "search")
        context = context or LookupContext()

        text = query.q.strip()
        offset = query.offset(self._page_size)
        key = cache_keys.search_key(kind, text, offset)

        async def fetch(token: str) -> dict[str, Any]:
            return await self._client.search(
                kind.value, text, offset, self._page_size, token, context.challenge_params
            )

        return await self._cached_lookup(
            kind, key, fetch, context, "search_by", query=text, offset=offset
        )

    async def list_by_artist(
        self,
        artist_id: str,
        kind: LookupKind | str,
        context: LookupContext | None = None,
        page: int = 0,
    ) -> LookupResult:
        """List an artist's tracks or albums, one page at a time.

        Raises
        ------
        InvalidLookupKindError
            If *kind* is not an artist-scoped kind.  Raised before any I/O.
        ValueError
            If *page* is negative.  Raised before any I/O.
        """
        kind = _coerce_kind(kind, ARTIST_KINDS, "artist listing")
        if page < 0:
            raise ValueError(f"page must be >= 0, got {page}")
        context = context or LookupContext()

        artist_id = str(artist_id).strip()
        offset = page * self._page_size
        key = cache_keys.artist_key(kind, artist_id, offset)

        async def fetch(token: str) -> dict[str, Any]:
            return await self._client.list_by_artist(
                kind.value, artist_id, offset, self._page_size, token, context.challenge_params
            )

        return await self._cached_lookup(
            kind, key, fetch, context, "artist_items", artist_id=artist_id, offset=offset
        )

    async def get_album_by_id(
        self,
        album_id: str,
        owner_id: str | None = None,
        access_key: str | None = None,
        context: LookupContext | None = None,
    ) -> LookupResult:
        """Fetch an album's complete track listing."""
        context = context or LookupContext()
        album_id = str(album_id).strip()
        key = cache_keys.album_key(album_id, owner_id, access_key)

        async def fetch(token: str) -> dict[str, Any]:
            return await self._client.get_album(
                album_id,
                owner_id,
                access_key,
                token,
                self._album_track_count,
                context.challenge_params,
            )

        return await self._cached_lookup(
            LookupKind.ALBUM_BY_ID, key, fetch, context, "album_by_id", album_id=album_id
        )

    # -- Named shortcuts for each lookup kind --------------------------------

    async def search_albums(self, query: Query, context: LookupContext | None = None) -> LookupResult:
        return await self.search(query, LookupKind.ALBUMS, context)

    async def search_artists(self, query: Query, context: LookupContext | None = None) -> LookupResult:
        return await self.search(query, LookupKind.ARTISTS, context)

    async def get_artist_tracks(
        self, artist_id: str, context: LookupContext | None = None, page: int = 0
    ) -> LookupResult:
        return await self.list_by_artist(artist_id, LookupKind.ARTIST_TRACKS, context, page)

    async def get_artist_albums(
        self, artist_id: str, context: LookupContext | None = None, page: int = 0
    ) -> LookupResult:
        return await self.list_by_artist(artist_id, LookupKind.ARTIST_ALBUMS, context, page)

    # ------------------------------------------------------------------
    # Cache-aside core
    # ------------------------------------------------------------------

    async def _cached_lookup(
        self,
        kind: LookupKind,
        key: str,
        fetch: Callable[[str], Awaitable[dict[str, Any]]],
        context: LookupContext,
        event: str,
        **log_fields: Any,
    ) -> LookupResult:
        result_kind = _RESULT_KINDS[kind]

        cached = await self._cache.get(key)
        if cached is not None:
            self._logger.info(f"{event}_cache", kind=kind.value, **log_fields)
            return LookupResult(kind=result_kind, items=tuple(cached))

        token = self._credentials.token(context.token_index)
        body = await fetch(token)
        items = self._normalizer.normalize(kind, body)

        await self._cache.set(key, items)
        self._logger.info(
            event,
            kind=kind.value,
            account=context.token_index,
            count=len(items),
            **log_fields,
        )
        return LookupResult(kind=result_kind, items=items)

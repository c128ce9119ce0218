"""Compound lookups built from several engine calls.

Each compound query resolves a name to an entity first and then lists that
entity's tracks:

    artist:<name>   → first matching artist (upstream relevance order)
                      → that artist's tracks
    album:<name>    → most-played matching album (first among ties)
                      → that album's tracks
    albums:<name>   → up to N most-played matching albums
                      → every album's tracks, concatenated

Ranking by plays happens only here, after the search result has been
served (and cached) under its raw query, so the cache never depends on a
ranking decision.

"No result" is ``None``: the name search legitimately matched nothing.  It
is distinct from an empty :class:`LookupResult` and from a raised
:class:`UpstreamError`.
"""

from __future__ import annotations

import asyncio

import structlog

from tracklookup.models.credentials import LookupContext
from tracklookup.models.items import Album, LookupKind, LookupResult, ResultKind, Track
from tracklookup.models.query import Query, QueryIntent
from tracklookup.services.lookup_engine import EntityLookupEngine
from tracklookup.utils.concurrency import throttled_gather
from tracklookup.utils.errors import InvalidLookupKindError, UpstreamError
from tracklookup.utils.logging import get_logger

MAX_ALBUMS_LIMIT = 10


class AggregationService:
    """Answers compound queries by composing :class:`EntityLookupEngine` calls.

    Parameters
    ----------
    engine:
        The lookup engine every sub-lookup goes through (and is cached by).
    max_albums_limit:
        Cap on albums fetched by :meth:`tracks_by_album_name_multiple`;
        clamped to :data:`MAX_ALBUMS_LIMIT`.
    max_concurrent_lookups:
        How many album lookups of one fan-out may be in flight at once.
    """

    def __init__(
        self,
        engine: EntityLookupEngine,
        max_albums_limit: int = MAX_ALBUMS_LIMIT,
        max_concurrent_lookups: int = 5,
    ) -> None:
        self._engine = engine
        # The cap is fixed; a larger configured value cannot raise it.
        self._max_albums_limit = min(max_albums_limit, MAX_ALBUMS_LIMIT)
        self._semaphore = asyncio.Semaphore(max_concurrent_lookups)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Prefix dispatch
    # ------------------------------------------------------------------

    async def search(self, query: Query, context: LookupContext | None = None) -> LookupResult | None:
        """Route a prefixed query to the matching compound lookup.

        Raises
        ------
        InvalidLookupKindError
            If *query* carries no compound prefix tag.
        """
        intent = query.intent
        if intent is QueryIntent.ARTIST:
            return await self.tracks_by_artist_name(query.q, context, page=query.page)
        if intent is QueryIntent.ALBUM:
            return await self.tracks_by_album_name(query.q, context, page=query.page)
        if intent is QueryIntent.ALBUMS:
            return await self.tracks_by_album_name_multiple(query.q, context, page=query.page)
        raise InvalidLookupKindError(message="Query has no compound prefix (artist:, album:, albums:)")

    # ------------------------------------------------------------------
    # Compound lookups
    # ------------------------------------------------------------------

    async def tracks_by_artist_name(
        self,
        text: str,
        context: LookupContext | None = None,
        page: int = 0,
    ) -> LookupResult | None:
        """Tracks of the first artist matching *text*, or ``None`` if no artist matches."""
        context = context or LookupContext()
        query = self._name_query(text, page)

        artists = await self._engine.search(query, LookupKind.ARTISTS, context)
        self._log_name_search("tracks_by_artist_name", query.q, context, len(artists.items))
        if not artists.items:
            return None

        # Upstream relevance order is trusted as-is.
        first = artists.items[0]
        return await self._engine.list_by_artist(first.id, LookupKind.ARTIST_TRACKS, context, page)

    async def tracks_by_album_name(
        self,
        text: str,
        context: LookupContext | None = None,
        page: int = 0,
    ) -> LookupResult | None:
        """Tracks of the most-played album matching *text*, or ``None`` if none match."""
        context = context or LookupContext()
        query = self._name_query(text, page)

        albums = await self._engine.search(query, LookupKind.ALBUMS, context)
        self._log_name_search("tracks_by_album_name", query.q, context, len(albums.items))
        if not albums.items:
            return None

        # max() keeps the first of equal keys, so ties go to upstream order.
        album = max(albums.items, key=lambda a: a.plays)
        return await self._fetch_album(album, context)

    async def tracks_by_album_name_multiple(
        self,
        text: str,
        context: LookupContext | None = None,
        limit: int = MAX_ALBUMS_LIMIT,
        page: int = 0,
    ) -> LookupResult | None:
        """Concatenated tracks of the top albums matching *text* by plays.

        At most ``min(limit, max_albums_limit)`` albums are fetched, in
        parallel.  Tracks come back grouped per album in ranked order, never
        in completion order.  An album whose lookup fails with an
        :class:`UpstreamError` is left out; the rest are still returned.
        """
        context = context or LookupContext()
        query = self._name_query(text, page)

        albums = await self._engine.search(query, LookupKind.ALBUMS, context)
        self._log_name_search("tracks_by_album_name_multiple", query.q, context, len(albums.items))
        if not albums.items:
            return None

        effective_limit = max(0, min(limit, self._max_albums_limit))
        # sorted() is stable under reverse=True: equal plays keep upstream order.
        ranked = sorted(albums.items, key=lambda a: a.plays, reverse=True)[:effective_limit]

        results = await throttled_gather(
            [self._fetch_album(album, context) for album in ranked],
            semaphore=self._semaphore,
        )

        tracks: list[Track] = []
        for album, result in zip(ranked, results):
            if isinstance(result, UpstreamError):
                self._logger.warning(
                    "album_lookup_failed",
                    album_id=album.id,
                    owner_id=album.owner_id,
                    error=str(result),
                )
                continue
            if isinstance(result, BaseException):
                raise result
            tracks.extend(result.items)

        return LookupResult(kind=ResultKind.AUDIOS, items=tuple(tracks))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _name_query(text: str, page: int) -> Query:
        """Search query for the name in *text*, with any prefix tag removed."""
        query = Query(q=text, page=page)
        return query.with_text(query.stripped_text)

    async def _fetch_album(self, album: Album, context: LookupContext) -> LookupResult:
        return await self._engine.get_album_by_id(
            str(album.id), str(album.owner_id), album.access_key, context
        )

    def _log_name_search(self, operation: str, name: str, context: LookupContext, count: int) -> None:
        self._logger.info(
            "search_by_name",
            operation=operation,
            query=name,
            account=context.token_index,
            count=count,
        )

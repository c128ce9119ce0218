"""Canonical item shapes returned by every lookup.

Upstream payloads are loosely-typed JSON maps; the result normalizer turns
them into the frozen models below so nothing downstream touches raw dicts.
``NormalizedItem`` is a tagged union discriminated by ``item_type``.

Frozen models plus tuple containers make cached payloads safe to share
between overlapping requests: nobody can mutate an entry in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class LookupKind(str, Enum):  # noqa: UP042
    """What a lookup fetches.  Values double as the cache-key namespace.

    Search kinds map to ``audio.search{Albums,Artists}``; artist kinds map
    to ``audio.get{AudiosByArtist,AlbumsByArtist}``; ``ALBUM_BY_ID`` maps to
    ``audio.get`` scoped to one album.
    """

    ALBUMS = "albums"
    ARTISTS = "artists"
    ARTIST_TRACKS = "audiosByArtist"
    ARTIST_ALBUMS = "albumsByArtist"
    ALBUM_BY_ID = "albumById"


SEARCH_KINDS = frozenset({LookupKind.ALBUMS, LookupKind.ARTISTS})
ARTIST_KINDS = frozenset({LookupKind.ARTIST_TRACKS, LookupKind.ARTIST_ALBUMS})


class ResultKind(str, Enum):  # noqa: UP042
    """Tag on a :class:`LookupResult` telling the renderer what the items are."""

    AUDIOS = "audios"
    ALBUMS = "albums"
    ARTISTS = "artists"


class Track(BaseModel):
    """A playable audio item."""

    model_config = ConfigDict(frozen=True)

    item_type: Literal["track"] = "track"
    id: int
    owner_id: int
    title: str
    artist: str
    duration: int = 0
    access_key: str | None = None
    url: str | None = None
    plays: int | None = None
    album_id: int | None = None
    cover_url: str | None = None

    @property
    def source_id(self) -> str:
        """Upstream's composite identifier, ``{owner_id}_{id}``."""
        return f"{self.owner_id}_{self.id}"


class Album(BaseModel):
    """An album (upstream "playlist") as returned by search or artist listing."""

    model_config = ConfigDict(frozen=True)

    item_type: Literal["album"] = "album"
    id: int
    owner_id: int
    title: str
    access_key: str | None = None
    plays: int = 0
    artist: str | None = None
    year: int | None = None
    count: int | None = None
    cover_url: str | None = None


class Artist(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_type: Literal["artist"] = "artist"
    id: str
    name: str
    domain: str | None = None
    photo_url: str | None = None


NormalizedItem = Annotated[Union[Track, Album, Artist], Field(discriminator="item_type")]


class LookupResult(BaseModel):
    """Tagged batch of normalized items.

    An empty ``items`` tuple is a legitimate zero-match outcome, not an error.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResultKind
    items: tuple[NormalizedItem, ...] = ()

"""Turns raw catalog responses into canonical items.

Two jobs, always in this order:

1. **Error extraction** -- a body carrying an ``error`` object (or missing
   its ``response``) is mapped to the matching :class:`UpstreamError`
   subclass and raised, so nothing downstream ever caches a failure.
2. **Item shaping** -- ``response.items`` is converted into frozen
   :class:`Track`, :class:`Album` or :class:`Artist` models.  Items that
   cannot be shaped (no id, wrong types) are dropped with a debug log rather
   than failing the whole batch.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from tracklookup.models.items import Album, Artist, LookupKind, Track
from tracklookup.utils.errors import (
    ChallengeRequiredError,
    InvalidTokenError,
    RateLimitError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from tracklookup.utils.logging import get_logger

# Upstream error codes grouped by how callers should react.
_RATE_LIMIT_CODES = frozenset({6, 9, 29})
_INVALID_TOKEN_CODES = frozenset({5})
_NOT_FOUND_CODES = frozenset({15, 18, 113, 201})
_CHALLENGE_CODE = 14

_TRACK_KINDS = frozenset({LookupKind.ARTIST_TRACKS, LookupKind.ALBUM_BY_ID})
_ALBUM_KINDS = frozenset({LookupKind.ALBUMS, LookupKind.ARTIST_ALBUMS})


def _largest_photo(photo: Any) -> str | None:
    """Pick the best cover URL from either a ``photo_*`` dict or a sized list."""
    if isinstance(photo, dict):
        sizes = sorted(
            (k for k in photo if k.startswith("photo_") and k[6:].isdigit()),
            key=lambda k: int(k[6:]),
        )
        return photo[sizes[-1]] if sizes else None
    if isinstance(photo, list) and photo:
        best = max(
            (p for p in photo if isinstance(p, dict) and p.get("url")),
            key=lambda p: p.get("width", 0),
            default=None,
        )
        return best["url"] if best else None
    return None


class ResultNormalizer:
    """Stateless converter from catalog JSON to normalized items."""

    def __init__(self, provider_name: str = "vk") -> None:
        self._provider_name = provider_name
        self._logger = get_logger(__name__)

    # -- Error extraction ------------------------------------------------------

    def check_error(self, body: dict[str, Any]) -> None:
        """Raise the :class:`UpstreamError` subclass matching *body*'s error, if any."""
        error = body.get("error")
        if error is None:
            if "response" not in body:
                raise UpstreamUnavailableError(
                    message="Catalog response has neither 'response' nor 'error'",
                    provider_name=self._provider_name,
                )
            return

        if not isinstance(error, dict):
            raise UpstreamError(message=str(error), provider_name=self._provider_name)

        code = error.get("error_code")
        message = error.get("error_msg") or "Upstream catalog request failed"

        if code == _CHALLENGE_CODE:
            raise ChallengeRequiredError(
                message=message,
                provider_name=self._provider_name,
                error_code=code,
                challenge_sid=error.get("captcha_sid"),
                challenge_image_url=error.get("captcha_img"),
            )
        if code in _RATE_LIMIT_CODES:
            raise RateLimitError(message=message, provider_name=self._provider_name, error_code=code)
        if code in _INVALID_TOKEN_CODES:
            raise InvalidTokenError(message=message, provider_name=self._provider_name, error_code=code)
        if code in _NOT_FOUND_CODES:
            raise UpstreamNotFoundError(
                message=message, provider_name=self._provider_name, error_code=code
            )
        raise UpstreamError(message=message, provider_name=self._provider_name, error_code=code)

    # -- Item shaping ----------------------------------------------------------

    @staticmethod
    def _raw_items(body: dict[str, Any]) -> list[dict[str, Any]]:
        response = body.get("response")
        if isinstance(response, dict):
            items = response.get("items", [])
        elif isinstance(response, list):
            items = response
        else:
            items = []
        return [item for item in items if isinstance(item, dict)]

    def parse_tracks(self, body: dict[str, Any]) -> tuple[Track, ...]:
        tracks: list[Track] = []
        for item in self._raw_items(body):
            album = item.get("album") if isinstance(item.get("album"), dict) else {}
            try:
                tracks.append(
                    Track(
                        id=item["id"],
                        owner_id=item["owner_id"],
                        title=str(item.get("title", "")).strip(),
                        artist=str(item.get("artist", "")).strip(),
                        duration=item.get("duration") or 0,
                        access_key=item.get("access_key"),
                        url=item.get("url") or None,
                        plays=item.get("plays"),
                        album_id=album.get("id"),
                        cover_url=_largest_photo(album.get("thumb")),
                    )
                )
            except (KeyError, ValidationError) as exc:
                self._logger.debug("track_item_skipped", item_id=item.get("id"), error=str(exc))
        return tuple(tracks)

    def parse_albums(self, body: dict[str, Any]) -> tuple[Album, ...]:
        albums: list[Album] = []
        for item in self._raw_items(body):
            main_artists = [a for a in item.get("main_artists") or [] if isinstance(a, dict)]
            artist = main_artists[0].get("name") if main_artists else item.get("artist")
            photo = item.get("photo") or (item.get("thumbs") or [None])[0]
            try:
                albums.append(
                    Album(
                        id=item["id"],
                        owner_id=item["owner_id"],
                        title=str(item.get("title", "")).strip(),
                        access_key=item.get("access_key"),
                        plays=item.get("plays") or 0,
                        artist=artist,
                        year=item.get("year"),
                        count=item.get("count"),
                        cover_url=_largest_photo(photo),
                    )
                )
            except (KeyError, ValidationError) as exc:
                self._logger.debug("album_item_skipped", item_id=item.get("id"), error=str(exc))
        return tuple(albums)

    def parse_artists(self, body: dict[str, Any]) -> tuple[Artist, ...]:
        artists: list[Artist] = []
        for item in self._raw_items(body):
            try:
                artists.append(
                    Artist(
                        id=str(item["id"]),
                        name=str(item.get("name", "")).strip(),
                        domain=item.get("domain"),
                        photo_url=_largest_photo(item.get("photo")),
                    )
                )
            except (KeyError, ValidationError) as exc:
                self._logger.debug("artist_item_skipped", item_id=item.get("id"), error=str(exc))
        return tuple(artists)

    def normalize(self, kind: LookupKind, body: dict[str, Any]) -> tuple[Track | Album | Artist, ...]:
        """Check *body* for an upstream error, then shape its items for *kind*."""
        self.check_error(body)
        if kind in _TRACK_KINDS:
            return self.parse_tracks(body)
        if kind in _ALBUM_KINDS:
            return self.parse_albums(body)
        return self.parse_artists(body)

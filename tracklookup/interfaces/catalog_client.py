"""Abstract base class for the upstream music-catalog client.

The catalog client is a thin transport adapter: it issues one read-only GET
per call and returns the decoded JSON body untouched.  Detecting error
indicators and shaping items is the result normalizer's job, so a client
implementation never needs to know what the payload means.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class ICatalogClient(ABC):
    """Contract for the external catalog API.

    Every method merges *extra_params* (opaque anti-bot challenge
    parameters) into the query string without interpreting them.
    """

    @abstractmethod
    async def search(
        self,
        entity_type: str,
        q: str,
        offset: int,
        count: int,
        access_token: str,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Search the catalog for *entity_type* (``"albums"`` or ``"artists"``).

        Raises
        ------
        tracklookup.utils.errors.UpstreamUnavailableError
            If the request could not be completed or the body is not JSON.
        """

    @abstractmethod
    async def list_by_artist(
        self,
        entity_type: str,
        artist_id: str,
        offset: int,
        count: int,
        access_token: str,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """List an artist's items; *entity_type* is ``"audiosByArtist"`` or ``"albumsByArtist"``."""

    @abstractmethod
    async def get_album(
        self,
        album_id: str,
        owner_id: str | None,
        access_key: str | None,
        access_token: str,
        count: int,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Fetch the complete track listing of one album."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this catalog, e.g. ``"vk"``."""

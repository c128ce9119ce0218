"""VK audio API client implementing ICatalogClient.

Issues GET requests against ``{base_url}/method/audio.*`` and returns the
decoded JSON body.  The body may carry an ``error`` object instead of a
``response``; recognising that is left to the result normalizer.  The
``httpx.AsyncClient`` is injected for testability and connection pooling.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from tracklookup.config.settings import Settings
from tracklookup.interfaces.catalog_client import ICatalogClient
from tracklookup.utils.errors import UpstreamUnavailableError
from tracklookup.utils.logging import get_logger


def _method_suffix(entity_type: str) -> str:
    """``"albums"`` -> ``"Albums"``, ``"audiosByArtist"`` -> ``"AudiosByArtist"``."""
    return entity_type[:1].upper() + entity_type[1:]


class VKCatalogClient(ICatalogClient):
    """Catalog client for VK's ``audio.*`` API methods."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self._http = http_client
        self._base_url = settings.catalog_base_url.rstrip("/")
        self._api_version = settings.catalog_api_version
        self._user_agent = settings.catalog_user_agent
        self._logger = get_logger(__name__)

    async def _get_json(
        self,
        method: str,
        params: dict[str, Any],
        extra_params: Mapping[str, str] | None,
    ) -> dict[str, Any]:
        # Core parameters win over challenge parameters on key collision.
        query: dict[str, Any] = dict(extra_params or {})
        query.update({k: v for k, v in params.items() if v is not None})
        query["v"] = self._api_version

        url = f"{self._base_url}/method/{method}"
        try:
            response = await self._http.get(
                url, params=query, headers={"User-Agent": self._user_agent}
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            self._logger.warning("catalog_request_failed", method=method, error=str(exc))
            raise UpstreamUnavailableError(
                message=f"Catalog request {method} failed: {type(exc).__name__}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            self._logger.warning("catalog_response_not_json", method=method, error=str(exc))
            raise UpstreamUnavailableError(
                message=f"Catalog response for {method} is not valid JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(body, dict):
            raise UpstreamUnavailableError(
                message=f"Catalog response for {method} is not a JSON object",
                provider_name=self.get_provider_name(),
            )
        return body

    # -- ICatalogClient implementation -----------------------------------------

    async def search(
        self,
        entity_type: str,
        q: str,
        offset: int,
        count: int,
        access_token: str,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._get_json(
            f"audio.search{_method_suffix(entity_type)}",
            {
                "access_token": access_token,
                "q": q,
                "offset": offset,
                "count": count,
            },
            extra_params,
        )

    async def list_by_artist(
        self,
        entity_type: str,
        artist_id: str,
        offset: int,
        count: int,
        access_token: str,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._get_json(
            f"audio.get{_method_suffix(entity_type)}",
            {
                "access_token": access_token,
                "artist_id": artist_id,
                "offset": offset,
                "count": count,
                "extended": 1,
            },
            extra_params,
        )

    async def get_album(
        self,
        album_id: str,
        owner_id: str | None,
        access_key: str | None,
        access_token: str,
        count: int,
        extra_params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._get_json(
            "audio.get",
            {
                "access_token": access_token,
                "album_id": album_id,
                "count": count,
                "owner_id": owner_id,
                "access_key": access_key,
            },
            extra_params,
        )

    def get_provider_name(self) -> str:
        return "vk"

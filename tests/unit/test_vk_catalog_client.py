"""Unit tests for VKCatalogClient request building and transport errors."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from tests.conftest import vk_error, vk_response
from tracklookup.config.settings import Settings
from tracklookup.providers.catalog.vk_catalog_client import VKCatalogClient
from tracklookup.utils.errors import UpstreamUnavailableError


def _make_client(body: Any = None) -> tuple[VKCatalogClient, AsyncMock]:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = vk_response([]) if body is None else body

    http = AsyncMock()
    http.get = AsyncMock(return_value=mock_response)

    settings = Settings(
        catalog_base_url="https://api.example/",
        catalog_api_version="5.71",
        catalog_user_agent="test-agent",
    )
    return VKCatalogClient(http_client=http, settings=settings), http


class TestRequests:
    @pytest.mark.asyncio
    async def test_search_albums(self) -> None:
        client, http = _make_client()

        await client.search("albums", "Geogaddi", 50, 50, "tok")

        url = http.get.await_args.args[0]
        params = http.get.await_args.kwargs["params"]
        assert url == "https://api.example/method/audio.searchAlbums"
        assert params == {
            "access_token": "tok",
            "q": "Geogaddi",
            "offset": 50,
            "count": 50,
            "v": "5.71",
        }
        assert http.get.await_args.kwargs["headers"] == {"User-Agent": "test-agent"}

    @pytest.mark.asyncio
    async def test_search_artists_method_name(self) -> None:
        client, http = _make_client()
        await client.search("artists", "x", 0, 50, "tok")
        assert http.get.await_args.args[0].endswith("/method/audio.searchArtists")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("entity_type", "method"),
        [
            ("audiosByArtist", "audio.getAudiosByArtist"),
            ("albumsByArtist", "audio.getAlbumsByArtist"),
        ],
    )
    async def test_list_by_artist(self, entity_type: str, method: str) -> None:
        client, http = _make_client()

        await client.list_by_artist(entity_type, "8418", 0, 50, "tok")

        assert http.get.await_args.args[0].endswith(f"/method/{method}")
        params = http.get.await_args.kwargs["params"]
        assert params["artist_id"] == "8418"
        assert params["extended"] == 1

    @pytest.mark.asyncio
    async def test_get_album_drops_missing_qualifiers(self) -> None:
        client, http = _make_client()

        await client.get_album("5", None, None, "tok", 200)

        params = http.get.await_args.kwargs["params"]
        assert http.get.await_args.args[0].endswith("/method/audio.get")
        assert params == {"access_token": "tok", "album_id": "5", "count": 200, "v": "5.71"}

    @pytest.mark.asyncio
    async def test_get_album_with_owner_and_key(self) -> None:
        client, http = _make_client()
        await client.get_album("5", "-1", "abc", "tok", 200)
        params = http.get.await_args.kwargs["params"]
        assert params["owner_id"] == "-1"
        assert params["access_key"] == "abc"

    @pytest.mark.asyncio
    async def test_challenge_params_merged_but_core_params_win(self) -> None:
        client, http = _make_client()

        await client.search(
            "albums",
            "x",
            0,
            50,
            "tok",
            {"captcha_sid": "sid", "captcha_key": "abc", "access_token": "evil"},
        )

        params = http.get.await_args.kwargs["params"]
        assert params["captcha_sid"] == "sid"
        assert params["captcha_key"] == "abc"
        assert params["access_token"] == "tok"

    @pytest.mark.asyncio
    async def test_error_body_returned_as_is(self) -> None:
        client, _ = _make_client(vk_error(14, "Captcha needed"))
        body = await client.search("albums", "x", 0, 50, "tok")
        assert body["error"]["error_code"] == 14

    def test_provider_name(self) -> None:
        client, _ = _make_client()
        assert client.get_provider_name() == "vk"


class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_http_error_raises_unavailable(self) -> None:
        client, http = _make_client()
        http.get = AsyncMock(side_effect=httpx.ConnectTimeout("timeout"))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.search("albums", "x", 0, 50, "tok")
        assert exc_info.value.provider_name == "vk"

    @pytest.mark.asyncio
    async def test_error_message_omits_request_url(self) -> None:
        client, http = _make_client()
        http.get = AsyncMock(
            side_effect=httpx.ConnectError("failed for /method/audio.get?access_token=tok")
        )

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.get_album("5", None, None, "tok", 200)
        assert "tok" not in exc_info.value.message
        assert "ConnectError" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_json_raises_unavailable(self) -> None:
        client, http = _make_client()
        http.get.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(UpstreamUnavailableError):
            await client.search("albums", "x", 0, 50, "tok")

    @pytest.mark.asyncio
    async def test_non_object_body_raises_unavailable(self) -> None:
        client, _ = _make_client(["not", "an", "object"])

        with pytest.raises(UpstreamUnavailableError):
            await client.get_album("5", None, None, "tok", 200)

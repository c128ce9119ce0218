"""Unit tests for ResultNormalizer error extraction and item shaping."""

from __future__ import annotations

import pytest

from tests.conftest import raw_album, raw_artist, raw_track, vk_error, vk_response
from tracklookup.models.items import Album, Artist, LookupKind, Track
from tracklookup.services.result_normalizer import ResultNormalizer
from tracklookup.utils.errors import (
    ChallengeRequiredError,
    InvalidTokenError,
    RateLimitError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)


@pytest.fixture()
def normalizer() -> ResultNormalizer:
    return ResultNormalizer("vk")


class TestCheckError:
    def test_success_body_passes(self, normalizer: ResultNormalizer) -> None:
        normalizer.check_error(vk_response([]))

    @pytest.mark.parametrize(
        ("code", "error_type"),
        [
            (6, RateLimitError),
            (29, RateLimitError),
            (5, InvalidTokenError),
            (15, UpstreamNotFoundError),
            (201, UpstreamNotFoundError),
            (10, UpstreamError),
        ],
    )
    def test_error_codes_map_to_types(
        self, normalizer: ResultNormalizer, code: int, error_type: type[UpstreamError]
    ) -> None:
        with pytest.raises(error_type) as exc_info:
            normalizer.check_error(vk_error(code, "boom"))
        assert exc_info.value.error_code == code
        assert exc_info.value.message == "boom"
        assert exc_info.value.provider_name == "vk"

    def test_challenge_error_carries_sid_and_image(self, normalizer: ResultNormalizer) -> None:
        body = vk_error(14, "Captcha needed", captcha_sid="123", captcha_img="https://img/captcha")
        with pytest.raises(ChallengeRequiredError) as exc_info:
            normalizer.check_error(body)
        assert exc_info.value.challenge_sid == "123"
        assert exc_info.value.challenge_image_url == "https://img/captcha"

    def test_body_without_response_is_unavailable(self, normalizer: ResultNormalizer) -> None:
        with pytest.raises(UpstreamUnavailableError):
            normalizer.check_error({"something": "else"})


class TestParseItems:
    def test_parse_tracks(self, normalizer: ResultNormalizer) -> None:
        raw = raw_track(7, owner_id=100)
        raw["album"] = {"id": 55, "thumb": {"photo_68": "s.jpg", "photo_300": "m.jpg"}}

        tracks = normalizer.parse_tracks(vk_response([raw]))

        assert tracks == (
            Track(
                id=7,
                owner_id=100,
                title="Track 7",
                artist="Boards of Canada",
                duration=240,
                access_key="ak7",
                url="https://cdn.example/100_7.mp3",
                album_id=55,
                cover_url="m.jpg",
            ),
        )
        assert tracks[0].source_id == "100_7"

    def test_track_without_id_is_skipped(self, normalizer: ResultNormalizer) -> None:
        tracks = normalizer.parse_tracks(vk_response([{"owner_id": 1, "title": "x"}, raw_track(2)]))
        assert [t.id for t in tracks] == [2]

    def test_empty_url_becomes_none(self, normalizer: ResultNormalizer) -> None:
        raw = raw_track(3)
        raw["url"] = ""
        assert normalizer.parse_tracks(vk_response([raw]))[0].url is None

    def test_parse_albums(self, normalizer: ResultNormalizer) -> None:
        albums = normalizer.parse_albums(vk_response([raw_album(9, plays=1234)]))

        assert len(albums) == 1
        album = albums[0]
        assert isinstance(album, Album)
        assert album.plays == 1234
        assert album.artist == "Boards of Canada"
        assert album.access_key == "key9"
        assert album.cover_url == "https://img.example/600.jpg"

    def test_album_without_plays_defaults_to_zero(self, normalizer: ResultNormalizer) -> None:
        raw = raw_album(1, plays=0)
        del raw["plays"]
        assert normalizer.parse_albums(vk_response([raw]))[0].plays == 0

    def test_parse_artists(self, normalizer: ResultNormalizer) -> None:
        artists = normalizer.parse_artists(vk_response([raw_artist("8418", "Aphex Twin")]))
        assert artists == (
            Artist(
                id="8418",
                name="Aphex Twin",
                domain="aphextwin",
                photo_url="https://img.example/a-big.jpg",
            ),
        )

    def test_list_shaped_response(self, normalizer: ResultNormalizer) -> None:
        tracks = normalizer.parse_tracks({"response": [raw_track(1), raw_track(2)]})
        assert [t.id for t in tracks] == [1, 2]


class TestNormalize:
    @pytest.mark.parametrize(
        ("kind", "item_type"),
        [
            (LookupKind.ALBUMS, Album),
            (LookupKind.ARTIST_ALBUMS, Album),
            (LookupKind.ARTISTS, Artist),
        ],
    )
    def test_dispatches_on_kind(
        self, normalizer: ResultNormalizer, kind: LookupKind, item_type: type
    ) -> None:
        raw = raw_artist("1") if item_type is Artist else raw_album(1, plays=3)
        items = normalizer.normalize(kind, vk_response([raw]))
        assert all(isinstance(i, item_type) for i in items)

    @pytest.mark.parametrize("kind", [LookupKind.ARTIST_TRACKS, LookupKind.ALBUM_BY_ID])
    def test_track_kinds_produce_tracks(self, normalizer: ResultNormalizer, kind: LookupKind) -> None:
        items = normalizer.normalize(kind, vk_response([raw_track(1)]))
        assert isinstance(items[0], Track)

    def test_error_checked_before_shaping(self, normalizer: ResultNormalizer) -> None:
        with pytest.raises(RateLimitError):
            normalizer.normalize(LookupKind.ALBUMS, vk_error(6))

import asyncio

import httpx
import pytest

from semaninha.core.lastfm_client import LastFmClient, album_from_json, best_image_url, lastfm_period
from semaninha.errors import ProviderError, UserNotFound

TOP_ALBUMS = {
    "topalbums": {
        "album": [
            {
                "name": "Kid A",
                "playcount": "42",
                "artist": {"name": "Radiohead"},
                "image": [
                    {"size": "small", "#text": "https://lastfm.example/s.png"},
                    {"size": "extralarge", "#text": "https://lastfm.example/xl.png"},
                ],
            },
            {
                "name": "Loveless",
                "playcount": "n/a",
                "artist": {"name": "My Bloody Valentine"},
                "image": [],
            },
        ]
    }
}


def _client(handler):
    return LastFmClient(
        api_key="test-key",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        base_url="https://lastfm.example/2.0/",
    )


@pytest.mark.parametrize(
    "period,expected",
    [("7day", "7day"), ("3month", "3month"), ("12month", "12month"), ("custom", "1month")],
)
def test_period_mapping(period, expected):
    assert lastfm_period(period) == expected


def test_best_image_prefers_largest():
    images = [
        {"size": "medium", "#text": "m"},
        {"size": "large", "#text": "l"},
        {"size": "mega", "#text": ""},
    ]
    assert best_image_url(images) == "l"
    assert best_image_url([{"size": "mega", "#text": "mega"}]) == "mega"
    assert best_image_url([{"size": "large", "#text": ""}]) == ""
    assert best_image_url(None) == ""


def test_album_id_is_sanitized():
    album = album_from_json({"name": "OK Computer!", "artist": {"name": "Radio head"}})
    assert album.id == "Radio-head-OK-Computer-"


def test_get_top_albums_maps_records():
    seen = {}

    def handler(request):
        seen.update(dict(request.url.params))
        return httpx.Response(200, json=TOP_ALBUMS)

    albums = asyncio.run(_client(handler).get_top_albums("alice", "weird", 9))
    assert seen["method"] == "user.gettopalbums"
    assert seen["user"] == "alice"
    assert seen["period"] == "1month"
    assert seen["limit"] == "9"
    assert seen["api_key"] == "test-key"
    assert [a.name for a in albums] == ["Kid A", "Loveless"]
    assert albums[0].artwork_url == "https://lastfm.example/xl.png"
    assert albums[0].play_count == 42
    assert albums[1].artwork_url == ""
    assert albums[1].play_count == 0


def test_unknown_user_raises_user_not_found():
    def handler(request):
        return httpx.Response(404, json={"error": 6, "message": "User not found"})

    with pytest.raises(UserNotFound):
        asyncio.run(_client(handler).get_top_albums("ghost", "7day", 9))


def test_other_api_errors_raise_provider_error():
    def handler(request):
        return httpx.Response(200, json={"error": 10, "message": "Invalid API key"})

    with pytest.raises(ProviderError, match="Invalid API key"):
        asyncio.run(_client(handler).get_top_albums("alice", "7day", 9))


def test_non_json_response_is_provider_error():
    def handler(request):
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(ProviderError):
        asyncio.run(_client(handler).get_top_albums("alice", "7day", 9))


def test_verify_user():
    def handler(request):
        if request.url.params["user"] == "alice":
            return httpx.Response(200, json={"user": {"name": "alice"}})
        return httpx.Response(404, json={"error": 6, "message": "User not found"})

    client = _client(handler)
    assert asyncio.run(client.verify_user("alice")) is True
    assert asyncio.run(client.verify_user("ghost")) is False

import io

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from semaninha.api.app import app
from semaninha.api.state import AppState, get_state
from semaninha.core.image_loader import ImageLoader
from semaninha.core.lastfm_client import LastFmClient

from conftest import BAD_URL, GOOD_URL, fake_fetch

LASTFM_ALBUMS = {
    "topalbums": {
        "album": [
            {
                "name": f"Album {i}",
                "playcount": str(50 - i),
                "artist": {"name": f"Artist {i}"},
                "image": [{"size": "extralarge", "#text": GOOD_URL.format(i)}],
            }
            for i in range(12)
        ]
    }
}


def _lastfm_handler(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("user") == "ghost":
        return httpx.Response(404, json={"error": 6, "message": "User not found"})
    if request.url.params["method"] == "user.getinfo":
        return httpx.Response(200, json={"user": {"name": request.url.params["user"]}})
    return httpx.Response(200, json=LASTFM_ALBUMS)


class FakeSpotify:
    def current_user_top_tracks(self, limit=20, offset=0, time_range="medium_term"):
        return {
            "items": [
                {"album": {"id": "a1", "name": "One", "artists": [{"name": "X"}], "images": []}},
            ]
        }

    def current_user(self):
        return {"id": "sp-user", "display_name": "Spotty"}


@pytest.fixture
def state():
    return AppState(
        image_loader=ImageLoader(fetch=fake_fetch()),
        lastfm_client=LastFmClient(
            api_key="k",
            client=httpx.AsyncClient(transport=httpx.MockTransport(_lastfm_handler)),
        ),
        spotify=FakeSpotify(),
    )


@pytest.fixture
def client(state, settings_path):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


def _albums(n, bad=()):
    return [
        {
            "id": str(i),
            "name": f"Album {i}",
            "artist": f"Artist {i}",
            "artwork_url": BAD_URL if i in bad else GOOD_URL.format(i),
        }
        for i in range(n)
    ]


def test_render_returns_png_attachment(client):
    resp = client.post(
        "/api/collage/render",
        json={"albums": _albums(9, bad={4}), "grid_size": "3x3", "period": "7day",
              "display_name": "alice", "canvas_size": 300},
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.headers["content-disposition"] == 'attachment; filename="semaninha-3x3-7day.png"'
    assert resp.headers["x-collage-placeholders"] == "1"
    img = Image.open(io.BytesIO(resp.content))
    assert img.size == (340, 375)


def test_render_partial_list(client):
    resp = client.post(
        "/api/collage/render",
        json={"albums": _albums(5), "grid_size": "3x3", "canvas_size": 300},
    )
    assert resp.status_code == 200
    assert resp.headers["x-collage-placeholders"] == "0"


def test_render_bad_grid_is_400(client):
    resp = client.post("/api/collage/render", json={"albums": [], "grid_size": "notagrid"})
    assert resp.status_code == 400


def test_render_oversized_grid_is_400(client):
    resp = client.post("/api/collage/render", json={"albums": [], "grid_size": "500x500"})
    assert resp.status_code == 400


def test_render_bad_color_is_422(client):
    resp = client.post(
        "/api/collage/render",
        json={"albums": [], "grid_size": "3x3", "background_color": "not-a-color"},
    )
    assert resp.status_code == 422


def test_render_jpeg(client):
    resp = client.post(
        "/api/collage/render",
        json={"albums": _albums(1), "grid_size": "1x1", "canvas_size": 200,
              "image_format": "JPEG", "period": "1month"},
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert "semaninha-1x1-1month.jpg" in resp.headers["content-disposition"]


def test_generate_from_lastfm(client):
    resp = client.post(
        "/api/collage",
        json={"source": "lastfm", "username": "alice", "grid_size": "3x3",
              "period": "3month", "canvas_size": 300},
    )
    assert resp.status_code == 200
    assert "semaninha-3x3-3month.png" in resp.headers["content-disposition"]
    assert resp.headers["x-collage-placeholders"] == "0"


def test_generate_lastfm_requires_username(client):
    resp = client.post("/api/collage", json={"source": "lastfm"})
    assert resp.status_code == 400


def test_generate_lastfm_unknown_user_is_404(client):
    resp = client.post("/api/collage", json={"source": "lastfm", "username": "ghost"})
    assert resp.status_code == 404


def test_generate_from_spotify(client):
    resp = client.post(
        "/api/collage",
        json={"source": "spotify", "grid_size": "2x2", "canvas_size": 200},
    )
    assert resp.status_code == 200
    # the only album has no artwork
    assert resp.headers["x-collage-placeholders"] == "1"


def test_generate_uses_stored_settings(client):
    client.put("/api/settings/u1", json={"default_grid_size": "2x2", "default_time_period": "12month"})
    resp = client.post(
        "/api/collage",
        json={"source": "lastfm", "username": "alice", "user_id": "u1", "canvas_size": 200},
    )
    assert resp.status_code == 200
    assert "semaninha-2x2-12month.png" in resp.headers["content-disposition"]


def test_settings_crud(client):
    resp = client.get("/api/settings/u9")
    assert resp.status_code == 200
    assert resp.json()["default_grid_size"] == "3x3"

    resp = client.put("/api/settings/u9", json={"default_grid_size": "10x10", "show_artist_label": False})
    assert resp.json()["default_grid_size"] == "10x10"
    assert resp.json()["show_artist_label"] is False

    assert client.put("/api/settings/u9", json={"default_grid_size": "huge"}).status_code == 400
    assert client.delete("/api/settings/u9").status_code == 204
    assert client.delete("/api/settings/u9").status_code == 404


def test_lastfm_user_lookup(client):
    assert client.get("/api/lastfm/users/alice").json()["exists"] is True
    assert client.get("/api/lastfm/users/ghost").json()["exists"] is False

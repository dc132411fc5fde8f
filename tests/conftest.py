import io

import httpx
import pytest
from PIL import Image

from semaninha.core import settings_store
from semaninha.core.image_loader import ImageLoader
from semaninha.models.album import AlbumRecord

RED = (220, 20, 20)
GOOD_URL = "https://covers.example/{}.png"
BAD_URL = "https://unreachable.example/cover.png"


def png_bytes(color=RED, size=(16, 16)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_album(i: int, url: str = None, name: str = None, artist: str = None) -> AlbumRecord:
    return AlbumRecord(
        id=f"album-{i}",
        name=name or f"Album {i}",
        artist=artist or f"Artist {i}",
        artwork_url=GOOD_URL.format(i) if url is None else url,
        play_count=100 - i,
    )


def fake_fetch(bad_urls=(BAD_URL,), color=RED):
    """Fetch coroutine serving a solid PNG for every URL except bad_urls."""
    data = png_bytes(color)

    async def _fetch(url: str) -> bytes:
        if url in bad_urls:
            raise httpx.ConnectError("unreachable", request=httpx.Request("GET", url))
        return data

    return _fetch


@pytest.fixture
def loader():
    return ImageLoader(timeout_sec=2.0, fetch=fake_fetch())


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "user_settings.json"
    monkeypatch.setattr(settings_store, "USER_SETTINGS_PATH", path)
    return path

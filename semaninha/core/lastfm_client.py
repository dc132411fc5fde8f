"""Last.fm API client (public profiles, API key only) over httpx."""
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from semaninha.config import LASTFM_API_KEY, LASTFM_API_URL, LASTFM_TIMEOUT_SEC
from semaninha.errors import ProviderError, UserNotFound
from semaninha.models.album import AlbumRecord

logger = logging.getLogger(__name__)

# Last.fm error code for unknown users
ERROR_USER_NOT_FOUND = 6

LASTFM_PERIODS = ("7day", "1month", "3month", "12month")
IMAGE_SIZE_PREFERENCE = ("extralarge", "large", "medium", "small")

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def lastfm_period(period: str) -> str:
    """Pass through Last.fm's own periods; anything else becomes 1month."""
    return period if period in LASTFM_PERIODS else "1month"


def best_image_url(images: Any) -> str:
    """Largest usable cover URL from Last.fm's image list, or "" if none."""
    if not isinstance(images, list):
        return ""
    for size in IMAGE_SIZE_PREFERENCE:
        for image in images:
            if isinstance(image, dict) and image.get("size") == size and image.get("#text"):
                return image["#text"]
    for image in images:
        if isinstance(image, dict) and image.get("#text"):
            return image["#text"]
    return ""


def _play_count(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def album_from_json(item: Dict[str, Any]) -> AlbumRecord:
    """Map one user.gettopalbums entry to an AlbumRecord."""
    artist = item.get("artist") or {}
    artist_name = artist.get("name", "") if isinstance(artist, dict) else str(artist)
    name = item.get("name") or ""
    return AlbumRecord(
        id=_NON_ALNUM.sub("-", f"{artist_name}-{name}"),
        name=name,
        artist=artist_name,
        artwork_url=best_image_url(item.get("image")),
        play_count=_play_count(item.get("playcount")),
    )


class LastFmClient:
    """Reads top albums and profile existence from the Last.fm API."""

    def __init__(
        self,
        api_key: str = LASTFM_API_KEY,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = LASTFM_API_URL,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=LASTFM_TIMEOUT_SEC)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _call(self, method: str, **params: Any) -> Dict[str, Any]:
        query = {"method": method, "api_key": self.api_key, "format": "json", **params}
        try:
            response = await self._get_client().get(self.base_url, params=query)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Last.fm %s failed: %s", method, e)
            raise ProviderError(f"Last.fm request failed: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError("Unexpected Last.fm response")
        if data.get("error"):
            if data.get("error") == ERROR_USER_NOT_FOUND:
                raise UserNotFound(f"Last.fm user {params.get('user')!r} not found")
            logger.warning("Last.fm %s error %s: %s", method, data.get("error"), data.get("message"))
            raise ProviderError(data.get("message") or "Last.fm API error")
        if response.status_code >= 400:
            raise ProviderError(f"Last.fm returned HTTP {response.status_code}")
        return data

    async def verify_user(self, username: str) -> bool:
        """True if the profile exists. Other API errors propagate as ProviderError."""
        try:
            data = await self._call("user.getinfo", user=username)
        except UserNotFound:
            return False
        return bool(data.get("user"))

    async def get_top_albums(self, username: str, period: str, limit: int) -> List[AlbumRecord]:
        data = await self._call(
            "user.gettopalbums",
            user=username,
            period=lastfm_period(period),
            limit=str(limit),
        )
        items = (data.get("topalbums") or {}).get("album") or []
        if isinstance(items, dict):
            # Single-result responses come back as an object, not a list
            items = [items]
        return [album_from_json(item) for item in items if isinstance(item, dict)]

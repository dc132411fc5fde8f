"""Shared application state (injected into routes)."""
from typing import Optional

from spotipy import Spotify

from semaninha.core.compositor import CollageCompositor
from semaninha.core.image_loader import ImageLoader
from semaninha.core.lastfm_client import LastFmClient
from semaninha.core.providers import AlbumProvider, LastFmProvider, SpotifyProvider


class AppState:
    """Long-lived HTTP clients shared across requests.

    Collage surfaces are never shared: each request gets its own generate() call.
    """

    def __init__(
        self,
        image_loader: Optional[ImageLoader] = None,
        lastfm_client: Optional[LastFmClient] = None,
        spotify: Optional[Spotify] = None,
    ) -> None:
        self._image_loader = image_loader
        self._lastfm_client = lastfm_client
        # None means "use the cached OAuth token" on every call
        self._spotify = spotify

    @property
    def image_loader(self) -> ImageLoader:
        if self._image_loader is None:
            self._image_loader = ImageLoader()
        return self._image_loader

    @property
    def lastfm_client(self) -> LastFmClient:
        if self._lastfm_client is None:
            self._lastfm_client = LastFmClient()
        return self._lastfm_client

    def compositor(self) -> CollageCompositor:
        return CollageCompositor(loader=self.image_loader)

    def provider(self, source: str) -> AlbumProvider:
        if source == "lastfm":
            return LastFmProvider(self.lastfm_client)
        if source == "spotify":
            return SpotifyProvider(self._spotify)
        raise ValueError(f"Unknown provider {source!r}")

    async def aclose(self) -> None:
        if self._image_loader is not None:
            await self._image_loader.aclose()
        if self._lastfm_client is not None:
            await self._lastfm_client.aclose()


_state = AppState()


def get_state() -> AppState:
    return _state

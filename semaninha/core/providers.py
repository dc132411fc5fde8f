"""Listening-history providers behind one interface, and album selection for a grid."""
import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from spotipy import Spotify

from semaninha.config import COVER_CHECK_TIMEOUT_SEC
from semaninha.core import spotify_client
from semaninha.core.image_loader import ImageLoader
from semaninha.core.lastfm_client import LastFmClient
from semaninha.models.album import AlbumRecord

logger = logging.getLogger(__name__)

# When hiding albums without covers, ask providers for this many times the cell count
HIDE_WITHOUT_COVER_FETCH_FACTOR = 3


class AlbumProvider(Protocol):
    async def fetch_top_albums(self, identity: str, period: str, limit: int) -> List[AlbumRecord]:
        ...

    async def display_name(self, identity: str) -> Optional[str]:
        ...


class SpotifyProvider:
    """OAuth-linked Spotify account; identity is ignored (one linked account)."""

    def __init__(self, sp: Optional[Spotify] = None) -> None:
        self._sp = sp

    async def fetch_top_albums(self, identity: str, period: str, limit: int) -> List[AlbumRecord]:
        return await asyncio.to_thread(spotify_client.get_top_albums, period, limit, self._sp)

    async def display_name(self, identity: str) -> Optional[str]:
        return await asyncio.to_thread(spotify_client.get_display_name, self._sp)


class LastFmProvider:
    """Public Last.fm profile; identity is the Last.fm username."""

    def __init__(self, client: LastFmClient) -> None:
        self._client = client

    async def fetch_top_albums(self, identity: str, period: str, limit: int) -> List[AlbumRecord]:
        return await self._client.get_top_albums(identity, period, limit)

    async def display_name(self, identity: str) -> Optional[str]:
        return identity


def fetch_limit(cell_count: int, hide_without_cover: bool) -> int:
    """How many albums to request for a grid of cell_count cells."""
    if hide_without_cover:
        return cell_count * HIDE_WITHOUT_COVER_FETCH_FACTOR
    return cell_count


async def select_albums(
    albums: Sequence[AlbumRecord],
    cell_count: int,
    loader: ImageLoader,
    hide_without_cover: bool = False,
    timeout_sec: float = COVER_CHECK_TIMEOUT_SEC,
) -> List[AlbumRecord]:
    """Pick the albums that go into the grid, in input order.

    With hide_without_cover, only albums whose artwork actually loads are kept;
    candidates are checked in batches of cell_count until enough are found.
    The result may be shorter than cell_count.
    """
    if not hide_without_cover:
        return list(albums[:cell_count])

    selected: List[AlbumRecord] = []
    candidates = [a for a in albums if a.has_artwork]
    for start in range(0, len(candidates), max(1, cell_count)):
        if len(selected) >= cell_count:
            break
        batch = candidates[start:start + cell_count]
        results = await asyncio.gather(
            *(loader.load(a.artwork_url, timeout_sec=timeout_sec) for a in batch)
        )
        selected.extend(a for a, r in zip(batch, results) if r.ok)
    logger.info("Albums with a valid cover: %d of %d needed", min(len(selected), cell_count), cell_count)
    return selected[:cell_count]

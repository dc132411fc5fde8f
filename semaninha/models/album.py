"""Album records surfaced by listening-history providers."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AlbumRecord:
    """One listened-to album. artwork_url is "" when no cover is known."""
    id: str
    name: str
    artist: str
    artwork_url: str = ""
    play_count: Optional[int] = None

    @property
    def has_artwork(self) -> bool:
        return bool(self.artwork_url and self.artwork_url.strip())

"""Stored per-user collage preferences."""
from dataclasses import dataclass

from semaninha.config import DEFAULT_GRID_SIZE, DEFAULT_PERIOD


@dataclass
class UserSettings:
    """Defaults applied when the user generates a collage."""
    user_id: str
    default_grid_size: str = DEFAULT_GRID_SIZE
    default_time_period: str = DEFAULT_PERIOD
    show_artist_label: bool = True
    show_album_label: bool = True
    hide_albums_without_cover: bool = False
    created_at: str = ""
    updated_at: str = ""

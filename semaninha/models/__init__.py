"""Data models for albums, collage layout and user settings."""
from semaninha.models.album import AlbumRecord
from semaninha.models.collage import (
    CellReport,
    CellStatus,
    CollageResult,
    CompositionOptions,
    Geometry,
    GridSpec,
)
from semaninha.models.settings import UserSettings

__all__ = [
    "AlbumRecord",
    "CellReport",
    "CellStatus",
    "CollageResult",
    "CompositionOptions",
    "Geometry",
    "GridSpec",
    "UserSettings",
]

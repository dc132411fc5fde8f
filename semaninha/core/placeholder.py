"""Placeholder cell: deterministic color keyed by album name, plus centered text."""
import zlib
from typing import Tuple

from PIL import Image, ImageColor, ImageDraw

from semaninha.core.text import load_font, truncate
from semaninha.models.album import AlbumRecord

PLACEHOLDER_PALETTE = ("#8B5CF6", "#EC4899", "#F97316", "#10B981", "#3B82F6", "#EF4444")

ALBUM_NAME_LIMIT = 15
ARTIST_NAME_LIMIT = 20


def placeholder_color(album: AlbumRecord) -> Tuple[int, int, int]:
    """Palette color for album; CRC32 keeps it stable across processes."""
    index = zlib.crc32((album.name or "").encode("utf-8")) % len(PLACEHOLDER_PALETTE)
    return ImageColor.getrgb(PLACEHOLDER_PALETTE[index])


def render_placeholder(
    image: Image.Image, x: float, y: float, width: float, height: float, album: AlbumRecord
) -> None:
    """Fill the width x height cell at (x, y) with the album's color and draw its names in white.

    Font sizes follow the cell width.
    """
    draw = ImageDraw.Draw(image)
    draw.rectangle(
        (x, y, x + width - 1, y + height - 1),
        fill=placeholder_color(album),
    )
    cx, cy = x + width / 2, y + height / 2
    draw.text(
        (cx, cy - 10),
        truncate(album.name, ALBUM_NAME_LIMIT),
        fill="white",
        font=load_font(round(max(12, width / 15))),
        anchor="mm",
    )
    draw.text(
        (cx, cy + 10),
        truncate(album.artist, ARTIST_NAME_LIMIT),
        fill="white",
        font=load_font(round(max(10, width / 20))),
        anchor="mm",
    )

"""Artist/album overlay labels drawn top-left on a cell."""
from PIL import Image, ImageDraw

from semaninha.core.text import load_font, truncate
from semaninha.models.album import AlbumRecord

# Cells at or below this size (px) are too small for legible labels
LABEL_MIN_CELL_SIZE = 100

ARTIST_LABEL_LIMIT = 15
ALBUM_LABEL_LIMIT = 20

LABEL_BOX_FILL = (0, 0, 0, 102)  # rgba(0, 0, 0, 0.4)
ARTIST_TEXT_FILL = (255, 255, 255, 255)
ALBUM_TEXT_FILL = (255, 255, 255, 242)  # rgba(255, 255, 255, 0.95)


def should_render_labels(size: float, show_artist: bool, show_album: bool) -> bool:
    return (show_artist or show_album) and size > LABEL_MIN_CELL_SIZE


def label_font_size(size: float) -> float:
    return max(8, size / 25)


def render_labels(
    image: Image.Image,
    x: float,
    y: float,
    size: float,
    album: AlbumRecord,
    show_artist: bool,
    show_album: bool,
) -> None:
    """Stack artist (bold) then album name on translucent boxes fitted to the text.

    image must be RGBA; the labels are alpha-composited over it.
    """
    margin = size * 0.02
    font_size = label_font_size(size)
    line_height = font_size * 1.1

    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    left = x + margin
    current_y = y + margin

    rows = []
    if show_artist:
        rows.append((truncate(album.artist, ARTIST_LABEL_LIMIT), True, ARTIST_TEXT_FILL))
    if show_album:
        rows.append((truncate(album.name, ALBUM_LABEL_LIMIT), False, ALBUM_TEXT_FILL))

    for text, bold, fill in rows:
        font = load_font(round(font_size), bold=bold)
        width = draw.textlength(text, font=font)
        draw.rectangle(
            (left - 1, current_y - 1, left + width + 1, current_y + font_size + 1),
            fill=LABEL_BOX_FILL,
        )
        draw.text((left, current_y), text, fill=fill, font=font)
        current_y += line_height + 1

    image.alpha_composite(overlay)

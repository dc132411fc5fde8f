"""Text helpers shared by labels, placeholders and the caption: truncation and fonts."""
import logging
from functools import lru_cache
from typing import Iterable, Optional, Union

from PIL import ImageFont

from semaninha.config import BOLD_FONT_PATHS, CAPTION_FONT_PATH, REGULAR_FONT_PATHS

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


def truncate(text: str, limit: int) -> str:
    """Cut text to limit chars plus "..." when longer than limit; else unchanged."""
    text = text or ""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def _first_truetype(paths: Iterable[str], size: int) -> Optional[ImageFont.FreeTypeFont]:
    for path in paths:
        if not path:
            continue
        try:
            return ImageFont.truetype(path, size)
        except (OSError, ValueError):
            continue
    return None


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False) -> Font:
    """Return a TrueType font of the given pixel size, or Pillow's default font."""
    size = max(1, int(size))
    font = _first_truetype(BOLD_FONT_PATHS if bold else REGULAR_FONT_PATHS, size)
    if font is None:
        logger.debug("No system font found (bold=%s), using Pillow default", bold)
        return ImageFont.load_default(size=size)
    return font


@lru_cache(maxsize=8)
def load_caption_font(size: int) -> Font:
    """Stylized caption font, falling back to the plain bold font. Never raises."""
    size = max(1, int(size))
    font = _first_truetype([CAPTION_FONT_PATH], size)
    if font is None:
        if CAPTION_FONT_PATH:
            logger.info("Caption font %s unavailable, using fallback", CAPTION_FONT_PATH)
        return load_font(size, bold=True)
    return font

"""Bottom caption ("watermark"): period-specific text with product attribution."""
from PIL import Image, ImageDraw

from semaninha.config import (
    CAPTION_COLOR,
    CAPTION_FONT_SIZE,
    DEFAULT_DISPLAY_NAME,
    PRODUCT_ATTRIBUTION,
)
from semaninha.core.text import load_caption_font

CAPTION_SUFFIX = f" | Made at {PRODUCT_ATTRIBUTION}"

_CAPTION_TEMPLATES = {
    "7day": "Weekly recap of {name}",
    "1month": "Month of {name}",
    "3month": "Last 3 months of {name}",
    "12month": "Last year of {name}",
}
_DEFAULT_TEMPLATE = "Collage of {name}"


def compose_caption(period: str, display_name: str) -> str:
    """One fixed string per period, always naming the user and the product."""
    name = (display_name or "").strip() or DEFAULT_DISPLAY_NAME
    template = _CAPTION_TEMPLATES.get(period, _DEFAULT_TEMPLATE)
    return template.format(name=name) + CAPTION_SUFFIX


def render_caption(image: Image.Image, text: str, center_x: float, center_y: float) -> None:
    """Draw text centered on (center_x, center_y) in the caption font."""
    draw = ImageDraw.Draw(image)
    draw.text(
        (center_x, center_y),
        text,
        fill=CAPTION_COLOR,
        font=load_caption_font(CAPTION_FONT_SIZE),
        anchor="mm",
    )

"""Grid geometry, composition options and the encoded collage result."""
import base64
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from semaninha.config import BACKGROUND_COLOR, DEFAULT_CANVAS_SIZE, DEFAULT_PERIOD
from semaninha.errors import InvalidGridSpec, LoadError

_GRID_REGEX = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")

_MEDIA_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}


@dataclass(frozen=True)
class GridSpec:
    """Square grid: columns == rows."""
    columns: int

    @classmethod
    def parse(cls, text: str) -> "GridSpec":
        """Parse "NxN" (e.g. "3x3", "10x10"). Raises InvalidGridSpec."""
        match = _GRID_REGEX.match(text or "")
        if not match:
            raise InvalidGridSpec(f"Invalid grid size {text!r}: expected <N>x<N>")
        columns, rows = int(match.group(1)), int(match.group(2))
        if columns != rows:
            raise InvalidGridSpec(f"Invalid grid size {text!r}: grids must be square")
        if columns < 1:
            raise InvalidGridSpec(f"Invalid grid size {text!r}: must be at least 1x1")
        return cls(columns=columns)

    @property
    def rows(self) -> int:
        return self.columns

    @property
    def cell_count(self) -> int:
        return self.columns * self.columns

    def __str__(self) -> str:
        return f"{self.columns}x{self.columns}"


@dataclass(frozen=True)
class CompositionOptions:
    """Per-call collage configuration."""
    canvas_size: int = DEFAULT_CANVAS_SIZE
    show_artist_label: bool = False
    show_album_label: bool = False
    background_color: str = BACKGROUND_COLOR
    period: str = DEFAULT_PERIOD
    display_name: str = ""
    image_format: str = "PNG"  # "PNG" | "JPEG" | "WEBP"
    quality: int = 90  # ignored by lossless PNG


@dataclass(frozen=True)
class Geometry:
    """Resolved pixel layout for one collage."""
    columns: int
    cell_count: int
    cell_size: float
    interior_padding: float
    bottom_caption_padding: float
    caption_band_height: float
    canvas_size: float
    total_width: float
    total_height: float


class CellStatus(str, Enum):
    IMAGE = "image"
    PLACEHOLDER = "placeholder"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellReport:
    """What ended up in one grid cell."""
    index: int
    status: CellStatus
    labelled: bool = False
    error: Optional[LoadError] = None


@dataclass(frozen=True)
class CollageResult:
    """Encoded collage image. Owned by the caller."""
    data: bytes
    width: int
    height: int
    format: str
    cells: Tuple[CellReport, ...] = ()

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES.get(self.format.upper(), "application/octet-stream")

    @property
    def placeholder_count(self) -> int:
        return sum(1 for c in self.cells if c.status == CellStatus.PLACEHOLDER)

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"

"""Grid geometry: cell size, decorative border and caption band."""
from typing import Tuple, Union

from semaninha.config import CAPTION_BAND_HEIGHT
from semaninha.errors import InvalidGridSpec
from semaninha.models.collage import Geometry, GridSpec


def resolve(grid_spec: Union[str, GridSpec], canvas_size: float) -> Geometry:
    """Resolve a grid spec ("NxN") and interior canvas size to a pixel layout.

    The interior is canvas_size square. It is framed by interior_padding on the
    top, left and right, and by bottom_caption_padding plus the caption band
    at the bottom.
    """
    spec = grid_spec if isinstance(grid_spec, GridSpec) else GridSpec.parse(grid_spec)
    if not canvas_size or canvas_size <= 0:
        raise InvalidGridSpec(f"Canvas size must be positive, got {canvas_size!r}")
    if spec.columns > canvas_size:
        raise InvalidGridSpec(
            f"Grid {spec} does not fit a {canvas_size}px canvas (cells under 1px)"
        )

    cell_size = canvas_size / spec.columns
    padding = max(20, canvas_size * 0.025)
    bottom_padding = max(5, canvas_size * 0.006)
    return Geometry(
        columns=spec.columns,
        cell_count=spec.cell_count,
        cell_size=cell_size,
        interior_padding=padding,
        bottom_caption_padding=bottom_padding,
        caption_band_height=CAPTION_BAND_HEIGHT,
        canvas_size=canvas_size,
        total_width=canvas_size + padding * 2,
        total_height=canvas_size + padding + bottom_padding + CAPTION_BAND_HEIGHT,
    )


def cell_box(index: int, geometry: Geometry) -> Tuple[int, int, int, int]:
    """Pixel rectangle (left, top, right, bottom) for the cell at index, row-major.

    Edges are rounded from multiples of cell_size so neighbours share edges.
    """
    row, col = divmod(index, geometry.columns)
    size = geometry.cell_size
    return (
        int(round(col * size)),
        int(round(row * size)),
        int(round((col + 1) * size)),
        int(round((row + 1) * size)),
    )

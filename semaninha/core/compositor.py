"""CollageCompositor: tiles album artwork into a framed, captioned collage image."""
import asyncio
import io
import logging
from typing import List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageColor, ImageDraw

from semaninha.config import BORDER_COLOR, IMAGE_TIMEOUT_SEC, PRODUCT_NAME
from semaninha.core.caption import compose_caption, render_caption
from semaninha.core.geometry import cell_box, resolve
from semaninha.core.image_loader import ImageLoader, LoadResult
from semaninha.core.labels import render_labels, should_render_labels
from semaninha.core.placeholder import render_placeholder
from semaninha.errors import EncodingFailure
from semaninha.models.album import AlbumRecord
from semaninha.models.collage import (
    CellReport,
    CellStatus,
    CollageResult,
    CompositionOptions,
    Geometry,
    GridSpec,
)

logger = logging.getLogger(__name__)

CELL_BORDER_FILL = (255, 255, 255, 26)  # rgba(255, 255, 255, 0.1)

_EXTENSIONS = {"PNG": "png", "JPEG": "jpg", "WEBP": "webp"}

RenderedCell = Tuple[CellReport, Image.Image]


def encode_image(image: Image.Image, image_format: str = "PNG", quality: int = 90) -> bytes:
    """Serialize image; any encoder failure becomes EncodingFailure."""
    fmt = image_format.upper()
    buf = io.BytesIO()
    try:
        if fmt == "PNG":
            image.save(buf, format="PNG", optimize=True)
        else:
            image.convert("RGB").save(buf, format=fmt, quality=quality)
    except (OSError, ValueError, KeyError, MemoryError) as e:
        raise EncodingFailure(f"Could not encode collage as {fmt}: {e}") from e
    return buf.getvalue()


def download_filename(grid_spec: Union[str, GridSpec], period: str, image_format: str = "PNG") -> str:
    """File name for downloads, e.g. semaninha-3x3-7day.png."""
    ext = _EXTENSIONS.get(image_format.upper(), "png")
    return f"{PRODUCT_NAME}-{grid_spec}-{period}.{ext}"


class CollageCompositor:
    """Builds collage images from album records.

    Stateless between calls: every generate() gets fresh surfaces. Pass a
    shared ImageLoader to reuse its HTTP connections; without one, a loader is
    created and closed per call. image_timeout_sec, when set, overrides the
    loader's own per-cell timeout.

    Only fetching runs on the event loop; resizing, drawing and encoding run
    in worker threads.
    """

    def __init__(
        self,
        loader: Optional[ImageLoader] = None,
        image_timeout_sec: Optional[float] = None,
    ) -> None:
        self._loader = loader
        self.image_timeout_sec = image_timeout_sec

    async def generate(
        self,
        albums: Sequence[AlbumRecord],
        grid_spec: Union[str, GridSpec],
        options: Optional[CompositionOptions] = None,
    ) -> CollageResult:
        """Compose albums into a grid_spec collage.

        Raises InvalidGridSpec before any work, and EncodingFailure if the final
        image cannot be serialized. Individual cell failures become placeholders.
        """
        options = options or CompositionOptions()
        geometry = resolve(grid_spec, options.canvas_size)
        background = ImageColor.getrgb(options.background_color)[:3]
        placed = list(albums[: geometry.cell_count])

        if self._loader is not None:
            rendered = await self._render_cells(self._loader, placed, geometry, options, background)
        else:
            timeout = IMAGE_TIMEOUT_SEC if self.image_timeout_sec is None else self.image_timeout_sec
            async with ImageLoader(timeout_sec=timeout) as loader:
                rendered = await self._render_cells(loader, placed, geometry, options, background)

        outer = await asyncio.to_thread(_compose, rendered, geometry, options, background)
        data = await asyncio.to_thread(encode_image, outer, options.image_format, options.quality)

        cells = [report for report, _ in rendered]
        cells.extend(
            CellReport(index=i, status=CellStatus.EMPTY)
            for i in range(len(placed), geometry.cell_count)
        )
        result = CollageResult(
            data=data,
            width=outer.width,
            height=outer.height,
            format=options.image_format.upper(),
            cells=tuple(cells),
        )
        logger.info(
            "Collage %s: %dx%d, %d albums, %d placeholders",
            GridSpec(geometry.columns),
            result.width,
            result.height,
            len(placed),
            result.placeholder_count,
        )
        return result

    async def _render_cells(
        self,
        loader: ImageLoader,
        albums: List[AlbumRecord],
        geometry: Geometry,
        options: CompositionOptions,
        background: Tuple[int, int, int],
    ) -> List[RenderedCell]:
        # Fan out all loads, then join; each cell draws only into its own tile
        return list(
            await asyncio.gather(
                *(
                    self._render_cell(loader, index, album, geometry, options, background)
                    for index, album in enumerate(albums)
                )
            )
        )

    async def _render_cell(
        self,
        loader: ImageLoader,
        index: int,
        album: AlbumRecord,
        geometry: Geometry,
        options: CompositionOptions,
        background: Tuple[int, int, int],
    ) -> RenderedCell:
        result = await loader.load(album.artwork_url, timeout_sec=self.image_timeout_sec)
        return await asyncio.to_thread(
            _draw_cell, index, album, result, geometry, options, background
        )


def _draw_cell(
    index: int,
    album: AlbumRecord,
    result: LoadResult,
    geometry: Geometry,
    options: CompositionOptions,
    background: Tuple[int, int, int],
) -> RenderedCell:
    left, top, right, bottom = cell_box(index, geometry)
    width, height = right - left, bottom - top
    tile = Image.new("RGBA", (width, height), background + (255,))

    if not result.ok:
        render_placeholder(tile, 0, 0, width, height, album)
        return CellReport(index=index, status=CellStatus.PLACEHOLDER, error=result.error), tile

    # Stretched to the square cell; aspect ratio is not preserved
    tile.paste(result.image.resize((width, height), Image.Resampling.LANCZOS), (0, 0))
    border = Image.new("RGBA", tile.size, (0, 0, 0, 0))
    ImageDraw.Draw(border).rectangle((0, 0, width - 1, height - 1), outline=CELL_BORDER_FILL, width=1)
    tile.alpha_composite(border)

    labelled = should_render_labels(
        geometry.cell_size, options.show_artist_label, options.show_album_label
    )
    if labelled:
        render_labels(
            tile,
            0,
            0,
            geometry.cell_size,
            album,
            options.show_artist_label,
            options.show_album_label,
        )
    return CellReport(index=index, status=CellStatus.IMAGE, labelled=labelled), tile


def _compose(
    rendered: List[RenderedCell],
    geometry: Geometry,
    options: CompositionOptions,
    background: Tuple[int, int, int],
) -> Image.Image:
    """Blit finished tiles in order, then frame the interior and draw the caption."""
    canvas_px = int(round(geometry.canvas_size))
    interior = Image.new("RGB", (canvas_px, canvas_px), background)
    for report, tile in rendered:
        left, top, _, _ = cell_box(report.index, geometry)
        interior.paste(tile.convert("RGB"), (left, top))

    outer = Image.new(
        "RGB",
        (int(round(geometry.total_width)), int(round(geometry.total_height))),
        ImageColor.getrgb(BORDER_COLOR)[:3],
    )
    padding = int(round(geometry.interior_padding))
    outer.paste(interior, (padding, padding))

    caption = compose_caption(options.period, options.display_name)
    caption_y = (
        geometry.interior_padding
        + geometry.canvas_size
        + geometry.bottom_caption_padding
        + geometry.caption_band_height / 2
    )
    render_caption(outer, caption, geometry.total_width / 2, caption_y)
    return outer

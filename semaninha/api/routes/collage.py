"""Collage generation: from explicit albums or from a listening-history provider."""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from PIL import ImageColor
from pydantic import BaseModel, Field, field_validator

from semaninha.api.state import AppState, get_state
from semaninha.config import (
    BACKGROUND_COLOR,
    DEFAULT_CANVAS_SIZE,
    DEFAULT_GRID_SIZE,
    DEFAULT_PERIOD,
    MAX_GRID_COLUMNS,
)
from semaninha.core.compositor import download_filename
from semaninha.core.providers import fetch_limit, select_albums
from semaninha.core.settings_store import get_settings
from semaninha.errors import (
    EncodingFailure,
    InvalidGridSpec,
    NotAuthenticated,
    ProviderError,
    UserNotFound,
)
from semaninha.models.album import AlbumRecord
from semaninha.models.collage import CollageResult, CompositionOptions, GridSpec

logger = logging.getLogger(__name__)

router = APIRouter()


class AlbumBody(BaseModel):
    id: str = ""
    name: str
    artist: str
    artwork_url: str = ""
    play_count: Optional[int] = None


class CollageStyleBody(BaseModel):
    display_name: Optional[str] = None
    background_color: str = BACKGROUND_COLOR
    canvas_size: int = Field(DEFAULT_CANVAS_SIZE, ge=100, le=4000)
    image_format: Literal["PNG", "JPEG", "WEBP"] = "PNG"

    @field_validator("background_color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        ImageColor.getrgb(value)  # raises ValueError for unknown colors
        return value


class RenderCollageBody(CollageStyleBody):
    """Render a collage from albums the caller already fetched."""
    albums: List[AlbumBody]
    grid_size: str = DEFAULT_GRID_SIZE
    period: str = DEFAULT_PERIOD
    show_artist_label: bool = False
    show_album_label: bool = False


class GenerateCollageBody(CollageStyleBody):
    """Fetch top albums from a provider, then render. Unset fields use stored settings."""
    source: Literal["spotify", "lastfm"]
    username: Optional[str] = None
    user_id: Optional[str] = None
    grid_size: Optional[str] = None
    period: Optional[str] = None
    show_artist_label: Optional[bool] = None
    show_album_label: Optional[bool] = None
    hide_albums_without_cover: Optional[bool] = None


def _parse_grid(text: str) -> GridSpec:
    try:
        spec = GridSpec.parse(text)
    except InvalidGridSpec as e:
        raise HTTPException(status_code=400, detail=str(e))
    if spec.columns > MAX_GRID_COLUMNS:
        raise HTTPException(
            status_code=400,
            detail=f"Grid {spec} is too large (max {MAX_GRID_COLUMNS}x{MAX_GRID_COLUMNS})",
        )
    return spec


def _pick(value, default):
    return default if value is None else value


async def _render(
    state: AppState,
    albums: List[AlbumRecord],
    spec: GridSpec,
    options: CompositionOptions,
) -> Response:
    try:
        result: CollageResult = await state.compositor().generate(albums, spec, options)
    except InvalidGridSpec as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EncodingFailure as e:
        logger.error("Collage encoding failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    filename = download_filename(spec, options.period, result.format)
    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Collage-Placeholders": str(result.placeholder_count),
        },
    )


@router.post("/render")
async def render_collage(body: RenderCollageBody, state: AppState = Depends(get_state)):
    """Render a collage image from an explicit album list."""
    spec = _parse_grid(body.grid_size)
    albums = [AlbumRecord(**a.model_dump()) for a in body.albums]
    options = CompositionOptions(
        canvas_size=body.canvas_size,
        show_artist_label=body.show_artist_label,
        show_album_label=body.show_album_label,
        background_color=body.background_color,
        period=body.period,
        display_name=body.display_name or "",
        image_format=body.image_format,
    )
    return await _render(state, albums, spec, options)


@router.post("")
async def generate_collage(body: GenerateCollageBody, state: AppState = Depends(get_state)):
    """Fetch the user's top albums from Spotify or Last.fm and render their collage."""
    settings = get_settings(body.user_id) if body.user_id else None
    spec = _parse_grid(
        _pick(body.grid_size, settings.default_grid_size if settings else DEFAULT_GRID_SIZE)
    )
    period = _pick(body.period, settings.default_time_period if settings else DEFAULT_PERIOD)
    show_artist = _pick(body.show_artist_label, settings.show_artist_label if settings else False)
    show_album = _pick(body.show_album_label, settings.show_album_label if settings else False)
    hide = _pick(
        body.hide_albums_without_cover,
        settings.hide_albums_without_cover if settings else False,
    )

    if body.source == "lastfm" and not (body.username or "").strip():
        raise HTTPException(status_code=400, detail="A Last.fm username is required")
    identity = (body.username or "").strip()
    provider = state.provider(body.source)

    try:
        albums = await provider.fetch_top_albums(identity, period, fetch_limit(spec.cell_count, hide))
        display_name = body.display_name or await provider.display_name(identity) or ""
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotAuthenticated as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))

    albums = await select_albums(albums, spec.cell_count, state.image_loader, hide)
    options = CompositionOptions(
        canvas_size=body.canvas_size,
        show_artist_label=show_artist,
        show_album_label=show_album,
        background_color=body.background_color,
        period=period,
        display_name=display_name,
        image_format=body.image_format,
    )
    return await _render(state, albums, spec, options)

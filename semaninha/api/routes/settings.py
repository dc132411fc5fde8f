"""Per-user collage preferences CRUD (stored in JSON)."""
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from semaninha.api.state import AppState, get_state
from semaninha.core.settings_store import delete_settings, get_settings, update_settings
from semaninha.errors import InvalidGridSpec

router = APIRouter()


class UpdateSettingsBody(BaseModel):
    default_grid_size: Optional[str] = None
    default_time_period: Optional[str] = None
    show_artist_label: Optional[bool] = None
    show_album_label: Optional[bool] = None
    hide_albums_without_cover: Optional[bool] = None


@router.get("/{user_id}")
def read_settings(user_id: str, state: AppState = Depends(get_state)):
    """Return the user's settings, creating defaults on first access."""
    return asdict(get_settings(user_id))


@router.put("/{user_id}")
def write_settings(
    user_id: str,
    body: UpdateSettingsBody,
    state: AppState = Depends(get_state),
):
    """Update the user's settings. Omitted fields keep their current value."""
    try:
        updated = update_settings(user_id, **body.model_dump(exclude_none=True))
    except InvalidGridSpec as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(updated)


@router.delete("/{user_id}", status_code=204)
def remove_settings(user_id: str, state: AppState = Depends(get_state)):
    """Delete the user's settings."""
    if not delete_settings(user_id):
        raise HTTPException(status_code=404, detail="Settings not found")

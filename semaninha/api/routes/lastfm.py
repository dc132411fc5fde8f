"""Last.fm profile lookup."""
from fastapi import APIRouter, Depends, HTTPException

from semaninha.api.state import AppState, get_state
from semaninha.errors import ProviderError

router = APIRouter()


@router.get("/users/{username}")
async def verify_user(username: str, state: AppState = Depends(get_state)):
    """Return whether a Last.fm profile exists."""
    try:
        exists = await state.lastfm_client.verify_user(username)
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"username": username, "exists": exists}

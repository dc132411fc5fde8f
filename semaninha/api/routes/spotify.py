"""Spotify OAuth: auth URL, callback, logout and linked profile."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from semaninha.api.state import AppState, get_state
from semaninha.config import SEMANINHA_WEB_ORIGIN, SPOTIFY_CLIENT_ID
from semaninha.core.spotify_client import (
    clear_token,
    exchange_code_and_save_token,
    get_auth_url,
    get_display_name,
    get_spotify_client,
)

router = APIRouter()


@router.get("/auth-url")
def auth_url(state: Optional[str] = None, app_state: AppState = Depends(get_state)):
    """Return Spotify OAuth authorization URL and whether the user is logged in."""
    if not SPOTIFY_CLIENT_ID:
        return {"auth_url": None, "error": "SPOTIFY_CLIENT_ID not set", "logged_in": False}
    logged_in = get_spotify_client() is not None
    return {"auth_url": get_auth_url(state), "logged_in": logged_in}


@router.get("/callback")
def spotify_callback(code: Optional[str] = None, app_state: AppState = Depends(get_state)):
    """Exchange code for tokens, then redirect to the web app or show success."""
    if not code:
        return HTMLResponse(
            "<body><p>Missing authorization code. Try connecting Spotify again.</p></body>",
            status_code=400,
        )
    if not exchange_code_and_save_token(code):
        return HTMLResponse(
            "<body><p>Failed to link Spotify. Check backend logs and try again.</p></body>",
            status_code=500,
        )
    if SEMANINHA_WEB_ORIGIN:
        redirect_url = f"{SEMANINHA_WEB_ORIGIN.rstrip('/')}/?spotify=success"
        return RedirectResponse(url=redirect_url, status_code=302)
    return HTMLResponse(
        "<body><p>Spotify linked successfully. You can close this window.</p></body>"
    )


@router.post("/logout")
def logout(app_state: AppState = Depends(get_state)):
    """Clear the Spotify token so the user is logged out."""
    clear_token()
    return {"ok": True}


@router.get("/me")
def me(app_state: AppState = Depends(get_state)):
    """Display name of the linked Spotify account."""
    name = get_display_name()
    if name is None:
        raise HTTPException(
            status_code=503,
            detail="Spotify not linked. Use the Connect page to log in.",
        )
    return {"display_name": name}

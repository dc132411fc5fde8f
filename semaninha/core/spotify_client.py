"""Spotify API client via Spotipy; uses cached OAuth token."""
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

from spotipy import Spotify
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyOAuth

from semaninha.config import (
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
    SPOTIFY_TOKEN_CACHE,
    ensure_data_dir,
)
from semaninha.errors import NotAuthenticated, ProviderError
from semaninha.models.album import AlbumRecord

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
# Spotify has no top-albums endpoint; albums are aggregated from this many top tracks
TOP_TRACKS_LIMIT = 50

_TIME_RANGES = {
    "7day": "short_term",
    "1month": "short_term",
    "3month": "medium_term",
    "12month": "long_term",
}


def _auth_manager() -> SpotifyOAuth:
    ensure_data_dir()
    cache = CacheFileHandler(cache_path=str(SPOTIFY_TOKEN_CACHE))
    return SpotifyOAuth(
        client_id=SPOTIFY_CLIENT_ID,
        client_secret=SPOTIFY_CLIENT_SECRET,
        redirect_uri=SPOTIFY_REDIRECT_URI,
        scope=SPOTIFY_SCOPES,
        cache_handler=cache,
    )


def get_spotify_client() -> Optional[Spotify]:
    """Return an authenticated Spotipy Spotify client, or None if not logged in."""
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        return None
    auth = _auth_manager()
    token_info = auth.validate_token(auth.cache_handler.get_cached_token())
    if token_info is None:
        return None
    return Spotify(auth_manager=auth)


def get_auth_url(state: Optional[str] = None) -> Optional[str]:
    """Authorization URL for the login popup, or None if no client id is configured."""
    if not SPOTIFY_CLIENT_ID:
        return None
    params = {
        "client_id": SPOTIFY_CLIENT_ID,
        "response_type": "code",
        "redirect_uri": SPOTIFY_REDIRECT_URI,
        "scope": SPOTIFY_SCOPES,
        # Force the login screen so users can switch accounts
        "show_dialog": "true",
    }
    if state:
        params["state"] = state
    return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"


def exchange_code_and_save_token(code: str) -> bool:
    """Exchange OAuth code for tokens and save to cache. Returns True on success."""
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        return False
    try:
        _auth_manager().get_access_token(code=code, check_cache=False)
        return True
    except Exception as e:
        logger.warning("Spotify code exchange failed: %s", e)
        return False


def clear_token() -> None:
    """Forget the cached token (logout)."""
    try:
        if SPOTIFY_TOKEN_CACHE.exists():
            SPOTIFY_TOKEN_CACHE.unlink()
    except OSError as e:
        logger.warning("Could not remove Spotify token cache: %s", e)


def get_display_name(sp: Optional[Spotify] = None) -> Optional[str]:
    """Display name (or id) of the linked account, or None."""
    sp = sp or get_spotify_client()
    if sp is None:
        return None
    try:
        me = sp.current_user() or {}
    except Exception as e:
        logger.warning("Spotify current_user failed: %s", e)
        return None
    return me.get("display_name") or me.get("id")


def time_range_for_period(period: str) -> str:
    """Map a collage period to Spotify's time_range (Spotify has no 7-day window)."""
    return _TIME_RANGES.get(period, "medium_term")


def albums_from_top_tracks(tracks: List[Dict[str, Any]], limit: int) -> List[AlbumRecord]:
    """Unique albums from a top-tracks list, ordered by how many top tracks they hold.

    Ties keep the order in which albums first appear.
    """
    counts: Dict[str, int] = {}
    first_seen: Dict[str, Dict[str, Any]] = {}
    for track in tracks:
        album = (track or {}).get("album") or {}
        album_id = album.get("id")
        if not album_id:
            continue
        if album_id not in first_seen:
            first_seen[album_id] = album
            counts[album_id] = 0
        counts[album_id] += 1

    out = []
    for album_id, album in first_seen.items():
        artists = album.get("artists") or []
        images = album.get("images") or []
        out.append(
            AlbumRecord(
                id=album_id,
                name=album.get("name") or "",
                artist=(artists[0].get("name") or "") if artists else "",
                artwork_url=(images[0].get("url") or "") if images else "",
                play_count=counts[album_id],
            )
        )
    out.sort(key=lambda a: a.play_count or 0, reverse=True)
    return out[:limit]


def get_top_albums(period: str, limit: int, sp: Optional[Spotify] = None) -> List[AlbumRecord]:
    """Top albums for the linked account. Blocking; call from a worker thread."""
    sp = sp or get_spotify_client()
    if sp is None:
        raise NotAuthenticated("Spotify not linked. Use the Connect page to log in.")
    try:
        response = sp.current_user_top_tracks(
            limit=TOP_TRACKS_LIMIT, time_range=time_range_for_period(period)
        )
    except Exception as e:
        logger.warning("Spotify top tracks failed: %s", e)
        raise ProviderError(f"Failed to fetch top albums from Spotify: {e}") from e
    return albums_from_top_tracks((response or {}).get("items") or [], limit)

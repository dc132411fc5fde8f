"""Configuration: env, data paths, provider credentials, collage defaults."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of semaninha package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID, LASTFM_API_KEY etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("SEMANINHA_DATA_DIR", str(BASE_DIR / "data")))
USER_SETTINGS_PATH = DATA_DIR / "user_settings.json"
SPOTIFY_TOKEN_CACHE = DATA_DIR / ".spotify-token"

# API
API_HOST = os.getenv("SEMANINHA_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SEMANINHA_API_PORT", "8000"))
# After OAuth callback, redirect here (e.g. http://localhost:5173 for Vite dev)
SEMANINHA_WEB_ORIGIN = os.getenv("SEMANINHA_WEB_ORIGIN", "")

# Spotify (OAuth; tokens cached on disk after first connect)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = os.getenv("SPOTIFY_REDIRECT_URI", "http://localhost:8000/api/spotify/callback")
SPOTIFY_SCOPES = "user-top-read user-read-private"

# Last.fm (public profiles, API key only)
LASTFM_API_KEY = os.getenv("LASTFM_API_KEY", "")
LASTFM_API_URL = os.getenv("LASTFM_API_URL", "https://ws.audioscrobbler.com/2.0/")
LASTFM_TIMEOUT_SEC = float(os.getenv("SEMANINHA_LASTFM_TIMEOUT_SEC", "15"))

# Collage
PRODUCT_NAME = "semaninha"
PRODUCT_ATTRIBUTION = "semaninha.app"
DEFAULT_CANVAS_SIZE = 1200
DEFAULT_GRID_SIZE = "3x3"
DEFAULT_PERIOD = "7day"
DEFAULT_DISPLAY_NAME = "User"
BACKGROUND_COLOR = "#1a1a1a"
BORDER_COLOR = "#fffde8"
CAPTION_COLOR = "#000000"
CAPTION_BAND_HEIGHT = 50
CAPTION_FONT_SIZE = 22
IMAGE_TIMEOUT_SEC = float(os.getenv("SEMANINHA_IMAGE_TIMEOUT_SEC", "10"))
# Artwork responses larger than this are rejected (bytes)
MAX_IMAGE_BYTES = int(os.getenv("SEMANINHA_MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
# Shorter bound used when checking covers before generation
COVER_CHECK_TIMEOUT_SEC = float(os.getenv("SEMANINHA_COVER_CHECK_TIMEOUT_SEC", "5"))
# Largest grid the API will render (10x10 is the biggest preset; custom goes beyond)
MAX_GRID_COLUMNS = int(os.getenv("SEMANINHA_MAX_GRID_COLUMNS", "20"))

# Fonts (first path that loads wins; Pillow's built-in font is the last resort)
CAPTION_FONT_PATH = os.getenv("SEMANINHA_CAPTION_FONT", "")
REGULAR_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/Library/Fonts/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)
BOLD_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/Library/Fonts/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
)


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)

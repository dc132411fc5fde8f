"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging in the worker process (so core INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from semaninha.api.state import AppState, get_state
from semaninha.config import ensure_data_dir

# Import routes after state to avoid circular imports
from semaninha.api.routes import collage, lastfm, settings, spotify

__all__ = ["app", "AppState", "get_state"]

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    logging.getLogger(__name__).info("Semaninha API ready")

    yield

    await _state.aclose()


app = FastAPI(
    title="Semaninha API",
    description="Album collages from Spotify and Last.fm listening history",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Collage-Placeholders"],
)

app.include_router(collage.router, prefix="/api/collage", tags=["collage"])
app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
app.include_router(spotify.router, prefix="/api/spotify", tags=["spotify"])
app.include_router(lastfm.router, prefix="/api/lastfm", tags=["lastfm"])

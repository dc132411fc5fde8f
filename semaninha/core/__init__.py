"""Core services: collage compositor, image loading, providers, settings."""
from semaninha.core.compositor import CollageCompositor
from semaninha.core.image_loader import ImageLoader, LoadResult
from semaninha.core.lastfm_client import LastFmClient

__all__ = ["CollageCompositor", "ImageLoader", "LastFmClient", "LoadResult"]

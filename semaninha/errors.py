"""Error taxonomy for collage generation and listening-history providers."""
from enum import Enum


class SemaninhaError(Exception):
    """Base class for errors raised by the core."""


class InvalidGridSpec(SemaninhaError, ValueError):
    """Grid string could not be parsed to a usable square grid."""


class EncodingFailure(SemaninhaError):
    """Final image serialization failed."""


class ImageTooLarge(SemaninhaError):
    """Artwork response exceeded the download size cap."""


class ProviderError(SemaninhaError):
    """A listening-history provider could not return albums."""


class UserNotFound(ProviderError):
    """The requested profile does not exist on the provider."""


class NotAuthenticated(ProviderError):
    """The provider account is not linked (no valid OAuth token)."""


class LoadError(str, Enum):
    """Why a cell image is missing. Returned, never raised."""
    NO_URL = "no_url"
    FAILED = "failed"
    TIMEOUT = "timeout"

"""Cell image loading: fetch + decode with a timeout, failures returned as values."""
import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx
from PIL import Image

from semaninha.config import IMAGE_TIMEOUT_SEC, MAX_IMAGE_BYTES
from semaninha.errors import ImageTooLarge, LoadError

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[bytes]]


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one image load: either a decoded RGB image or a LoadError."""
    image: Optional[Image.Image] = None
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes to a fully loaded RGB image."""
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("RGB")


class ImageLoader:
    """Fetches and decodes artwork for collage cells.

    load() never raises for network, HTTP or decode problems; it returns a
    LoadResult carrying LoadError.FAILED or LoadError.TIMEOUT instead; responses
    over max_bytes count as FAILED. Task cancellation still propagates so
    abandoned collages release their loads.
    """

    def __init__(
        self,
        timeout_sec: float = IMAGE_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None,
        fetch: Optional[Fetch] = None,
        max_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self.timeout_sec = timeout_sec
        self.max_bytes = max_bytes
        self._client = client
        self._owns_client = client is None
        self._fetch = fetch or self._http_fetch

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # No httpx timeout: the per-cell bound is enforced by load()
            self._client = httpx.AsyncClient(timeout=None, follow_redirects=True)
        return self._client

    async def _http_fetch(self, url: str) -> bytes:
        async with self._get_client().stream("GET", url) as response:
            response.raise_for_status()
            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > self.max_bytes:
                raise ImageTooLarge(f"{declared} bytes exceeds the {self.max_bytes} byte cap")
            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > self.max_bytes:
                    raise ImageTooLarge(f"Body exceeds the {self.max_bytes} byte cap")
        return bytes(body)

    async def _fetch_and_decode(self, url: str) -> Image.Image:
        data = await self._fetch(url)
        return await asyncio.to_thread(decode_image, data)

    async def load(self, url: str, timeout_sec: Optional[float] = None) -> LoadResult:
        """Load one image; empty URL short-circuits to LoadError.NO_URL."""
        if not url or not url.strip():
            return LoadResult(error=LoadError.NO_URL)
        timeout = self.timeout_sec if timeout_sec is None else timeout_sec
        try:
            image = await asyncio.wait_for(self._fetch_and_decode(url.strip()), timeout)
        except asyncio.TimeoutError:
            logger.warning("Image load timed out after %.1fs: %s", timeout, url)
            return LoadResult(error=LoadError.TIMEOUT)
        except Exception as e:
            logger.warning("Image load failed: %s (%s)", url, e)
            return LoadResult(error=LoadError.FAILED)
        return LoadResult(image=image)

    async def aclose(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ImageLoader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

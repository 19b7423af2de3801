"""
Remote image loading for the renderers.

Downloads are cached in the ``images`` tier; a failed download returns None so
the renderer can draw a placeholder instead of failing the whole frame.
"""

import asyncio
import io
from typing import Dict, Iterable, Optional

import aiohttp
from PIL import Image

from tftbot.services.cache import TTLCache
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def decode_image(payload: bytes) -> Image.Image:
    return Image.open(io.BytesIO(payload)).convert("RGBA")


class ImageLoader:
    """Fetches and decodes remote PNGs through a cache tier."""

    def __init__(self, cache: TTLCache, timeout: float = 5.0):
        self.cache = cache
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _download(self, url: str) -> Image.Image:
        session = await self._get_session()
        async with session.get(url) as response:
            response.raise_for_status()
            payload = await response.read()
        return await asyncio.to_thread(decode_image, payload)

    async def load(self, url: str) -> Optional[Image.Image]:
        """Return the decoded image, or None if it cannot be fetched."""
        try:
            return await self.cache.get_or_load(url, lambda: self._download(url))
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.debug(f"Failed to load image {url}: {e}")
            return None

    async def load_many(self, urls: Iterable[str]) -> Dict[str, Image.Image]:
        """Load several images concurrently; failed ones are left out."""
        unique = list(dict.fromkeys(u for u in urls if u))
        images = await asyncio.gather(*(self.load(url) for url in unique))
        return {url: image for url, image in zip(unique, images) if image is not None}

"""
Tests for the cached image loader.
"""

import asyncio
import io

import aiohttp
import pytest
from PIL import Image

from tftbot.rendering import images
from tftbot.rendering.images import ImageLoader, decode_image
from tftbot.services.cache import TTLCache


def png_bytes(size=(2, 2)):
    buffer = io.BytesIO()
    Image.new("RGB", size, (255, 0, 0)).save(buffer, "PNG")
    return buffer.getvalue()


class FakeResponse:

    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientError(f"HTTP {self.status}")

    async def read(self):
        return self.payload


class FakeSession:

    closed = False

    def __init__(self, responses):
        self.responses = responses
        self.requested = []

    def get(self, url):
        self.requested.append(url)
        return self.responses[url]


def loader_with(responses, clock):
    loader = ImageLoader(TTLCache("images", ttl=60, clock=clock))
    loader._session = FakeSession(responses)
    return loader


def test_decode_image_converts_to_rgba():
    assert decode_image(png_bytes()).mode == "RGBA"


@pytest.mark.asyncio
async def test_decode_runs_in_worker_thread(monkeypatch, clock):
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args):
        offloaded.append(func)
        return await real_to_thread(func, *args)

    monkeypatch.setattr(images.asyncio, "to_thread", recording_to_thread)
    loader = loader_with({"https://cdn/a.png": FakeResponse(png_bytes())}, clock)

    image = await loader.load("https://cdn/a.png")

    assert image.mode == "RGBA"
    assert offloaded == [decode_image]


@pytest.mark.asyncio
async def test_loaded_images_are_cached(clock):
    loader = loader_with({"https://cdn/a.png": FakeResponse(png_bytes())}, clock)

    await loader.load("https://cdn/a.png")
    await loader.load("https://cdn/a.png")

    assert loader._session.requested == ["https://cdn/a.png"]


@pytest.mark.asyncio
async def test_failed_images_are_left_out(clock):
    loader = loader_with({
        "https://cdn/a.png": FakeResponse(png_bytes()),
        "https://cdn/missing.png": FakeResponse(b"", status=404),
        "https://cdn/garbage.png": FakeResponse(b"not a png"),
    }, clock)

    loaded = await loader.load_many([
        "https://cdn/a.png", "https://cdn/missing.png", "https://cdn/garbage.png", None
    ])

    assert list(loaded) == ["https://cdn/a.png"]

"""
Tests for the per-user command rate limiter.
"""

import pytest

from tftbot.services.rate_limiter import SimpleRateLimiter

from tests.conftest import FakeClock


@pytest.mark.asyncio
async def test_allows_up_to_limit_within_window():
    limiter = SimpleRateLimiter(clock=FakeClock())

    results = [await limiter.is_allowed(1, "tft", limit=2, window=60) for _ in range(3)]

    assert results == [True, True, False]


@pytest.mark.asyncio
async def test_window_slides():
    clock = FakeClock()
    limiter = SimpleRateLimiter(clock=clock)
    await limiter.is_allowed(1, "tft", limit=1, window=60)

    clock.advance(60)

    assert await limiter.is_allowed(1, "tft", limit=1, window=60)


@pytest.mark.asyncio
async def test_users_and_commands_are_separate():
    limiter = SimpleRateLimiter(clock=FakeClock())
    await limiter.is_allowed(1, "tft", limit=1, window=60)

    assert await limiter.is_allowed(2, "tft", limit=1, window=60)
    assert await limiter.is_allowed(1, "tft-stats", limit=1, window=60)


@pytest.mark.asyncio
async def test_invalid_parameters_rejected():
    limiter = SimpleRateLimiter(clock=FakeClock())

    assert not await limiter.is_allowed(1, "tft", limit=0, window=60)


@pytest.mark.asyncio
async def test_prune_drops_idle_users():
    clock = FakeClock()
    limiter = SimpleRateLimiter(clock=clock)
    await limiter.is_allowed(1, "tft", limit=3, window=60)
    clock.advance(30)
    await limiter.is_allowed(2, "tft", limit=3, window=60)
    clock.advance(31)

    assert limiter.prune() == 1
    assert len(limiter) == 1

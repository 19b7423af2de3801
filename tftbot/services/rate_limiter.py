"""
Per-user rate limiting for the Riot-backed slash commands.

Sliding windows kept in memory; the housekeeping sweep prunes idle users.
"""

import time
import asyncio
from functools import wraps
from collections import defaultdict, deque

from tftbot.config import Config
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)

class SimpleRateLimiter:
    """In-memory sliding-window rate limiter keyed by user and command."""

    def __init__(self, clock=time.monotonic):
        self._requests = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._clock = clock
        self._longest_window = 0

    async def is_allowed(self, user_id: int, command: str, limit: int, window: int) -> bool:
        """Record a call and report whether it fits in the window."""
        if limit <= 0 or window <= 0:
            return False

        key = f"{user_id}:{command}"
        now = self._clock()
        self._longest_window = max(self._longest_window, window)

        async with self._lock:
            requests = self._requests[key]
            while requests and requests[0] <= now - window:
                requests.popleft()

            if len(requests) < limit:
                requests.append(now)
                return True

            return False

    def prune(self) -> int:
        """Drop users with no call inside the longest window seen. Returns keys removed."""
        cutoff = self._clock() - self._longest_window
        stale = [key for key, requests in self._requests.items() if not requests or requests[-1] <= cutoff]
        for key in stale:
            del self._requests[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._requests)

def rate_limit(command: str, limit: int = 1, window: int = 60):
    """Decorator for rate limiting cog app commands. The bot owner is exempt."""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, interaction, *args, **kwargs):
            rate_limiter = self.bot.rate_limiter

            if interaction.user.id == Config.OWNER_DISCORD_ID:
                return await func(self, interaction, *args, **kwargs)

            if not await rate_limiter.is_allowed(interaction.user.id, command, limit, window):
                logger.info(f"Rate limited {interaction.user.id} on /{command}")
                await interaction.response.send_message(
                    f"⏰ Rate limit exceeded. Please wait before using `/{command}` again.",
                    ephemeral=True
                )
                return

            return await func(self, interaction, *args, **kwargs)
        return wrapper
    return decorator

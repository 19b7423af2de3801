"""
Tiered in-memory caching with per-tier TTLs.

Each tier is an independent key -> entry mapping with its own time-to-live.
Readers treat expired entries as absent immediately (lazy expiry); memory is
reclaimed only by ``sweep``, which HousekeepingCog runs on a fixed interval.

All access happens on the bot's event loop, so entries are replaced whole
between awaits and a reader never observes a half-stored value.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

from tftbot.config import Config
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)

V = TypeVar('V')
Clock = Callable[[], float]

_MISSING = object()


@dataclass
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """Key -> value mapping whose entries expire ``ttl`` seconds after being stored."""

    def __init__(self, name: str, ttl: float, clock: Clock = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"TTL for cache '{name}' must be positive")
        self.name = name
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry[V]] = {}
        self._inflight: Dict[Hashable, asyncio.Task] = {}
        self.hits = 0
        self.misses = 0

    def _is_live(self, entry: CacheEntry[V], now: float) -> bool:
        return now - entry.stored_at < self.ttl

    def _lookup(self, key: Hashable):
        entry = self._entries.get(key)
        if entry is None or not self._is_live(entry, self._clock()):
            self.misses += 1
            return _MISSING
        self.hits += 1
        return entry.value

    def get(self, key: Hashable, default: Optional[V] = None) -> Optional[V]:
        """Return the value if stored less than ``ttl`` seconds ago, else ``default``."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def put(self, key: Hashable, value: V) -> None:
        """Store unconditionally, resetting the entry's age."""
        self._entries[key] = CacheEntry(value, self._clock())

    def touch(self, key: Hashable) -> bool:
        """Reset a live entry's age. Returns False if the key is absent or expired."""
        entry = self._entries.get(key)
        now = self._clock()
        if entry is None or not self._is_live(entry, now):
            return False
        entry.stored_at = now
        return True

    def pop(self, key: Hashable) -> Optional[V]:
        entry = self._entries.pop(key, None)
        return entry.value if entry else None

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_live(entry, self._clock())

    def __len__(self) -> int:
        """Stored entries, including expired ones the sweep has not removed yet."""
        return len(self._entries)

    def live_count(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if self._is_live(entry, now))

    def sweep(self) -> int:
        """Physically remove expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_live(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_load(self, key: Hashable, loader: Callable[[], Awaitable[V]]) -> V:
        """
        Read-through access.

        Concurrent callers missing the same key share one ``loader`` call.
        The load runs in its own task, so a cancelled caller neither aborts it
        for the other waiters nor prevents the result from being cached.
        Loader failures propagate to every waiter and are never cached.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _load(self, key: Hashable, loader: Callable[[], Awaitable[V]]) -> V:
        try:
            value = await loader()
            self.put(key, value)
            return value
        finally:
            self._inflight.pop(key, None)


class TieredCacheManager:
    """Owns every cache tier; tiers never share keys or entries."""

    def __init__(self, clock: Clock = time.monotonic, **ttl_overrides: float):
        """
        Args:
            clock: Monotonic seconds source, injectable for tests
            ttl_overrides: Per-tier TTL in seconds (e.g. ``identity=60``)
        """
        ttls = {
            'identity': Config.CACHE_TTL_IDENTITY,
            'match_lists': Config.CACHE_TTL_MATCH_LIST,
            'match_details': Config.CACHE_TTL_MATCH_DETAIL,
            'frames': Config.CACHE_TTL_FRAME,
            'images': Config.CACHE_TTL_IMAGE,
            'sessions': Config.SESSION_TTL,
        }
        unknown = set(ttl_overrides) - set(ttls)
        if unknown:
            raise ValueError(f"Unknown cache tiers: {', '.join(sorted(unknown))}")
        ttls.update(ttl_overrides)

        self.identity: TTLCache[Any] = TTLCache('identity', ttls['identity'], clock)
        self.match_lists: TTLCache[Any] = TTLCache('match_lists', ttls['match_lists'], clock)
        self.match_details: TTLCache[Any] = TTLCache('match_details', ttls['match_details'], clock)
        self.frames: TTLCache[bytes] = TTLCache('frames', ttls['frames'], clock)
        self.images: TTLCache[Any] = TTLCache('images', ttls['images'], clock)
        self.sessions: TTLCache[Any] = TTLCache('sessions', ttls['sessions'], clock)

    @property
    def tiers(self) -> Dict[str, TTLCache]:
        return {
            tier.name: tier
            for tier in (self.identity, self.match_lists, self.match_details,
                         self.frames, self.images, self.sessions)
        }

    def sweep_all(self) -> Dict[str, int]:
        """Sweep every tier. Returns removed-entry counts keyed by tier name."""
        removed = {name: tier.sweep() for name, tier in self.tiers.items()}
        total = sum(removed.values())
        if total:
            logger.info(f"Cache sweep removed {total} expired entries: {removed}")
        else:
            logger.debug("Cache sweep found nothing to remove")
        return removed

    def stats(self) -> Dict[str, Dict[str, float]]:
        """Live/stored sizes and hit counts per tier."""
        return {
            name: {
                'live': tier.live_count(),
                'stored': len(tier),
                'hits': tier.hits,
                'misses': tier.misses,
                'ttl': tier.ttl,
            }
            for name, tier in self.tiers.items()
        }

    def clear_all(self) -> None:
        logger.info("Clearing every cache tier")
        for tier in self.tiers.values():
            tier.clear()

"""
Interactive session management for paginated match browsing.

A session pins a fixed match list and its fetched details so Previous/Next
buttons can re-render without touching the Riot API. Sessions live in the
``sessions`` cache tier: creation and every successful navigation reset the
TTL clock, and an untouched session simply expires. Users cannot close one.
"""

import time
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence, Tuple

from tftbot.data_models.climb import PlayerHeader
from tftbot.data_models.riot import MatchDetail
from tftbot.services.cache import TTLCache
from tftbot.utils.exceptions import InvalidTokenError, OutOfRangeError, SessionExpiredError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)

SESSION_PREFIX = "tft"
TOKEN_SEPARATOR = "_"
MIN_TOKEN_SEGMENTS = 3  # prefix, owner, ..., direction


class Direction(Enum):
    PREVIOUS = "prev"
    NEXT = "next"

    @property
    def step(self) -> int:
        return -1 if self is Direction.PREVIOUS else 1


@dataclass(frozen=True)
class NavigationAction:
    """A navigation request bound to one session."""
    session_key: str
    direction: Direction

    def encode(self) -> str:
        """Serialize for a Discord component custom_id."""
        return f"{self.session_key}{TOKEN_SEPARATOR}{self.direction.value}"

    @classmethod
    def decode(cls, token: str) -> "NavigationAction":
        """
        Parse a component custom_id back into an action.

        Raises:
            InvalidTokenError: If the token has too few segments or an unknown direction
        """
        parts = (token or "").split(TOKEN_SEPARATOR)
        if len(parts) < MIN_TOKEN_SEGMENTS or not all(parts):
            raise InvalidTokenError(token)
        try:
            direction = Direction(parts[-1])
        except ValueError:
            raise InvalidTokenError(token) from None
        return cls(TOKEN_SEPARATOR.join(parts[:-1]), direction)


@dataclass(frozen=True)
class Session:
    """Snapshot of one browsing session."""
    session_key: str
    owner_id: int
    match_ids: Tuple[str, ...]
    details: Mapping[str, MatchDetail]
    cursor: int
    player: PlayerHeader

    @property
    def size(self) -> int:
        return len(self.match_ids)

    @property
    def current_match_id(self) -> str:
        return self.match_ids[self.cursor]

    @property
    def current_detail(self) -> MatchDetail:
        return self.details[self.current_match_id]


class SessionManager:
    """Creates, resolves and navigates sessions stored in a cache tier."""

    def __init__(self, store: TTLCache, now_ms: Callable[[], int] = None):
        """
        Args:
            store: The ``sessions`` cache tier
            now_ms: Wall-clock millis used in session keys, injectable for tests
        """
        self.store = store
        self._now_ms = now_ms or (lambda: time.time_ns() // 1_000_000)

    def _new_key(self, owner_id: int) -> str:
        base = f"{SESSION_PREFIX}{TOKEN_SEPARATOR}{owner_id}{TOKEN_SEPARATOR}{self._now_ms()}"
        key = base
        suffix = 1
        # Two commands from one user in the same millisecond
        while key in self.store:
            key = f"{base}-{suffix}"
            suffix += 1
        return key

    def create(self, owner_id: int, match_ids: Sequence[str],
               details: Mapping[str, MatchDetail], player: PlayerHeader) -> str:
        """
        Store a new session positioned on the first match.

        Raises:
            ValueError: If the match list is empty or a match has no resolved detail
        """
        if not match_ids:
            raise ValueError("Cannot create a session without matches")
        missing = [match_id for match_id in match_ids if match_id not in details]
        if missing:
            raise ValueError(f"Session details incomplete, missing {missing}")

        key = self._new_key(owner_id)
        session = Session(
            session_key=key,
            owner_id=owner_id,
            match_ids=tuple(match_ids),
            details=MappingProxyType({match_id: details[match_id] for match_id in match_ids}),
            cursor=0,
            player=player,
        )
        self.store.put(key, session)
        logger.debug(f"Created session {key} with {session.size} matches")
        return key

    def get(self, session_key: str) -> Session:
        """
        Resolve a live session without extending its lifetime.

        Raises:
            SessionExpiredError: If the session is unknown or expired
        """
        session: Optional[Session] = self.store.get(session_key)
        if session is None:
            raise SessionExpiredError(session_key)
        return session

    def navigate(self, session_key: str, direction: Direction) -> Session:
        """
        Move the cursor one step and refresh the session's TTL.

        Returns:
            The updated session

        Raises:
            SessionExpiredError: If the session is unknown or expired
            OutOfRangeError: If the move would leave [0, N-1]; the cursor is unchanged
        """
        session = self.get(session_key)
        new_cursor = session.cursor + direction.step
        if not 0 <= new_cursor < session.size:
            raise OutOfRangeError(session_key, new_cursor, session.size)

        updated = replace(session, cursor=new_cursor)
        # put() resets stored_at, which is the touch-extend
        self.store.put(session_key, updated)
        logger.debug(f"Session {session_key} moved to match {new_cursor + 1}/{session.size}")
        return updated

    def handle(self, action: NavigationAction) -> Session:
        """Apply a decoded navigation action."""
        return self.navigate(action.session_key, action.direction)

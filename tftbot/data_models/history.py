"""
Match history and statistics data models.

Provides immutable data transfer objects for the paginated /tft view and the
/tft-stats summary.
"""

from dataclasses import dataclass, field
from typing import Dict

from tftbot.data_models.climb import PlayerHeader
from tftbot.data_models.riot import MatchDetail, MatchParticipant


@dataclass(frozen=True)
class MatchFrame:
    """One rendered page of the /tft match browser."""
    session_key: str
    cursor: int
    total: int
    player: PlayerHeader
    detail: MatchDetail
    participant: MatchParticipant
    image: bytes

    @property
    def has_previous(self) -> bool:
        return self.cursor > 0

    @property
    def has_next(self) -> bool:
        return self.cursor < self.total - 1


@dataclass(frozen=True)
class PlayerStats:
    """Aggregate statistics over a player's recent matches."""
    player: PlayerHeader
    games: int
    avg_placement: float
    top4_count: int
    wins: int
    avg_damage: int
    avg_eliminations: float
    avg_level: float
    game_types: Dict[str, int]
    placement_counts: Dict[int, int] = field(default_factory=dict)

    @property
    def top4_rate(self) -> float:
        return self.top4_count / self.games * 100 if self.games else 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.games * 100 if self.games else 0.0

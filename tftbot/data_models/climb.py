"""
Climb data models.

Immutable data transfer objects passed from the timeline reconstructor and
partner correlator to the embed builders and the climb graph renderer.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from tftbot.utils.rank import RankPoint


@dataclass(frozen=True)
class MatchOutcome:
    """One processed match from the requesting player's point of view."""
    match_id: str
    timestamp: int  # epoch millis
    team_placement: int
    lp_delta: int
    game_type: str
    partner_id: Optional[str] = None


@dataclass(frozen=True)
class TimelinePoint:
    """A point of the reconstructed LP timeline. Index 0 is the synthetic start."""
    game_index: int
    total_lp: int
    rank: RankPoint
    placement: Optional[int] = None
    lp_delta: Optional[int] = None
    partner_id: Optional[str] = None
    timestamp: Optional[int] = None
    match_id: Optional[str] = None


@dataclass(frozen=True)
class PartnerIdentity:
    """Resolved display data for a partner."""
    display_name: str
    icon_ref: Optional[int] = None


@dataclass(frozen=True)
class PartnerAggregate:
    """How often the player queued with one duo partner."""
    partner_id: str
    game_count: int
    display_name: Optional[str] = None
    icon_ref: Optional[int] = None

    @property
    def label(self) -> str:
        return self.display_name or self.partner_id


@dataclass(frozen=True)
class ClimbSummary:
    """Headline numbers shown next to the climb graph."""
    start_rank: RankPoint
    end_rank: RankPoint
    net_lp: int
    game_count: int
    placement_counts: Dict[int, int]
    top_rate: float  # percent of games finishing in a winning placement
    cutoff_ms: int

    @property
    def avg_lp_per_game(self) -> float:
        return self.net_lp / self.game_count if self.game_count else 0.0


@dataclass(frozen=True)
class PlayerHeader:
    """Who the report is about."""
    riot_id: str
    puuid: str
    profile_icon_id: int
    ranked_display: str


@dataclass(frozen=True)
class ClimbReport:
    """Everything the climb embed and graph need."""
    player: PlayerHeader
    timeline: Tuple[TimelinePoint, ...]
    partners: Tuple[PartnerAggregate, ...]
    summary: ClimbSummary
    skipped_matches: int = 0

    def top_partners(self, limit: int) -> List[PartnerAggregate]:
        return list(self.partners[:limit])

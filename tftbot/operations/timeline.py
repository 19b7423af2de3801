from collections import Counter
from typing import Dict, Iterable, List, Mapping, Tuple

from tftbot.data_models.climb import ClimbSummary, MatchOutcome, TimelinePoint
from tftbot.utils.exceptions import NoQualifyingMatchesError
from tftbot.utils.rank import RankPoint, from_total, to_total


class PlacementLPTable:
    """Deterministic placement -> LP delta step function"""

    def __init__(self, deltas: Mapping[int, int]):
        """
        Args:
            deltas: LP change keyed by placement, placements 1..N

        Raises:
            ValueError: If placements are not 1..N, deltas increase with a worse
                placement, or the table is not symmetric about its midpoint
        """
        placements = sorted(deltas)
        if placements != list(range(1, len(placements) + 1)):
            raise ValueError(f"Placements must be 1..N, got {placements}")

        values = [deltas[p] for p in placements]
        if any(better < worse for better, worse in zip(values, values[1:])):
            raise ValueError("LP deltas must not improve with a worse placement")
        if any(a != -b for a, b in zip(values, reversed(values))):
            raise ValueError("LP deltas must be symmetric about the placement midpoint")

        self._deltas: Dict[int, int] = dict(deltas)

    @property
    def size(self) -> int:
        return len(self._deltas)

    def delta(self, placement: int) -> int:
        """
        Get the LP change for a placement

        Raises:
            ValueError: If the placement is outside the table
        """
        try:
            return self._deltas[placement]
        except KeyError:
            raise ValueError(f"Placement {placement} outside 1..{self.size}") from None


# 8-player lobby
STANDARD_LP_TABLE = PlacementLPTable({1: 35, 2: 25, 3: 15, 4: 10, 5: -10, 6: -15, 7: -25, 8: -35})
# Double Up, indexed by team placement 1-4
DOUBLE_UP_LP_TABLE = PlacementLPTable({1: 35, 2: 15, 3: -15, 4: -35})


class TimelineReconstructor:
    """Rebuilds a per-match total-LP timeline from a current-rank snapshot"""

    @staticmethod
    def filter_outcomes(outcomes: Iterable[MatchOutcome], cutoff_ms: int, game_type: str) -> List[MatchOutcome]:
        """
        Keep outcomes of the target mode played at or after the cutoff, oldest first

        Sorting is stable, so outcomes sharing a timestamp keep their fetch order.
        """
        kept = [o for o in outcomes if o.timestamp >= cutoff_ms and o.game_type == game_type]
        kept.sort(key=lambda o: o.timestamp)
        return kept

    @staticmethod
    def reconstruct(anchor: RankPoint, outcomes: Iterable[MatchOutcome],
                    cutoff_ms: int, game_type: str) -> Tuple[TimelinePoint, ...]:
        """
        Reconstruct the LP timeline ending at the anchor rank

        The start is derived by subtracting every delta from the anchor, so the
        whole qualifying set is consumed before the first point is emitted.

        Args:
            anchor: Current authoritative rank
            outcomes: Unordered match outcomes with computed LP deltas
            cutoff_ms: Matches before this epoch-millis timestamp are ignored
            game_type: Mode discriminator, compared by equality only

        Returns:
            Timeline with one synthetic start point followed by one point per match

        Raises:
            NoQualifyingMatchesError: If no outcome survives filtering
        """
        ordered = TimelineReconstructor.filter_outcomes(outcomes, cutoff_ms, game_type)
        if not ordered:
            raise NoQualifyingMatchesError(f"no {game_type} matches since {cutoff_ms}")

        running_total = to_total(anchor) - sum(o.lp_delta for o in ordered)
        timeline = [TimelinePoint(game_index=0, total_lp=running_total, rank=from_total(running_total))]

        for index, outcome in enumerate(ordered, start=1):
            running_total += outcome.lp_delta
            timeline.append(TimelinePoint(
                game_index=index,
                total_lp=running_total,
                rank=from_total(running_total),
                placement=outcome.team_placement,
                lp_delta=outcome.lp_delta,
                partner_id=outcome.partner_id,
                timestamp=outcome.timestamp,
                match_id=outcome.match_id,
            ))

        return tuple(timeline)

    @staticmethod
    def summarize(timeline: Tuple[TimelinePoint, ...], top_cutoff: int, cutoff_ms: int) -> ClimbSummary:
        """
        Compute headline statistics for a reconstructed timeline

        Args:
            timeline: Output of ``reconstruct``
            top_cutoff: Placements at or above this count as a win (2 in Double Up)
            cutoff_ms: The cutoff the timeline was built with, for display
        """
        games = timeline[1:]
        placements = Counter(p.placement for p in games)
        top_count = sum(count for placement, count in placements.items() if placement <= top_cutoff)

        return ClimbSummary(
            start_rank=timeline[0].rank,
            end_rank=timeline[-1].rank,
            net_lp=timeline[-1].total_lp - timeline[0].total_lp,
            game_count=len(games),
            placement_counts=dict(sorted(placements.items())),
            top_rate=top_count / len(games) * 100 if games else 0.0,
            cutoff_ms=cutoff_ms,
        )

"""
Duo partner correlation.

Pairs the requesting player with the teammate sharing their team unit in each
match, then tallies how often each partner appears across a climb timeline.
"""

import asyncio
import math
from typing import Awaitable, Callable, Dict, Iterable, Optional, Sequence, Tuple

from tftbot.data_models.climb import PartnerAggregate, PartnerIdentity, TimelinePoint
from tftbot.data_models.riot import MatchParticipant
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)

TeamUnit = Callable[[int], int]
IdentityResolver = Callable[[str], Awaitable[PartnerIdentity]]


def double_up_team_unit(raw_placement: int) -> int:
    """Double Up teams share a pair of lobby placements: 1-2 -> 1, 3-4 -> 2, ..."""
    return math.ceil(raw_placement / 2)


def solo_team_unit(raw_placement: int) -> int:
    """Every player is their own team."""
    return raw_placement


def find_partner(participants: Sequence[MatchParticipant], puuid: str,
                 team_unit: TeamUnit) -> Optional[MatchParticipant]:
    """Find the other participant whose team unit matches the player's."""
    player = next((p for p in participants if p.puuid == puuid), None)
    if player is None:
        return None

    player_unit = team_unit(player.placement)
    return next(
        (p for p in participants if p.puuid != puuid and team_unit(p.placement) == player_unit),
        None
    )


def count_partners(timeline: Iterable[TimelinePoint]) -> Dict[str, int]:
    """Games per partner id, in order of first appearance."""
    counts: Dict[str, int] = {}
    for point in timeline:
        if point.partner_id:
            counts[point.partner_id] = counts.get(point.partner_id, 0) + 1
    return counts


class PartnerCorrelator:
    """Aggregates partners across a timeline and attaches their identities."""

    def __init__(self, resolve_identity: IdentityResolver):
        """
        Args:
            resolve_identity: Async callable returning a partner's display data.
                Memoization lives in the resolver; the correlator only guarantees
                a single call per partner per aggregation.
        """
        self.resolve_identity = resolve_identity

    async def aggregate(self, timeline: Iterable[TimelinePoint]) -> Tuple[PartnerAggregate, ...]:
        """
        Count one game per timeline point carrying a partner and resolve identities.

        Returns:
            Aggregates sorted by game count, most frequent first; ties keep
            first-appearance order
        """
        counts = count_partners(timeline)
        if not counts:
            return ()

        partner_ids = list(counts)
        identities = await asyncio.gather(*(self._resolve(pid) for pid in partner_ids))

        aggregates = []
        for partner_id, identity in zip(partner_ids, identities):
            aggregates.append(PartnerAggregate(
                partner_id=partner_id,
                game_count=counts[partner_id],
                display_name=identity.display_name if identity else None,
                icon_ref=identity.icon_ref if identity else None,
            ))

        aggregates.sort(key=lambda a: a.game_count, reverse=True)
        return tuple(aggregates)

    async def _resolve(self, partner_id: str) -> Optional[PartnerIdentity]:
        try:
            return await self.resolve_identity(partner_id)
        except ClimbBotError as e:
            # Partner stays listed under its opaque id
            logger.warning(f"Could not resolve partner {partner_id}: {e}")
            return None

from typing import Optional

from tftbot.data_models.climb import MatchOutcome
from tftbot.data_models.riot import MatchDetail
from tftbot.operations.partners import TeamUnit, find_partner
from tftbot.operations.timeline import PlacementLPTable


def build_outcome(detail: MatchDetail, puuid: str, table: PlacementLPTable,
                  team_unit: TeamUnit) -> Optional[MatchOutcome]:
    """
    Convert a match record into the player's outcome

    Args:
        detail: Parsed match record
        puuid: The requesting player
        table: Placement -> LP delta table, indexed by team placement
        team_unit: Raw lobby placement -> team placement

    Returns:
        The outcome, or None if the player did not take part in the match

    Raises:
        ValueError: If the team placement is outside the LP table
    """
    player = detail.participant(puuid)
    if player is None:
        return None

    team_placement = team_unit(player.placement)
    partner = find_partner(detail.participants, puuid, team_unit)

    return MatchOutcome(
        match_id=detail.match_id,
        timestamp=detail.game_datetime,
        team_placement=team_placement,
        lp_delta=table.delta(team_placement),
        game_type=detail.game_type,
        partner_id=partner.puuid if partner else None,
    )

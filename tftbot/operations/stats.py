from typing import Iterable

from tftbot.constants import PlacementConstants
from tftbot.data_models.climb import PlayerHeader
from tftbot.data_models.history import PlayerStats
from tftbot.data_models.riot import MatchDetail
from tftbot.utils.exceptions import NoQualifyingMatchesError

GAME_TYPE_LABELS = {
    'standard': 'Ranked',
    'pairs': 'Double Up',
}


def compute_player_stats(player: PlayerHeader, details: Iterable[MatchDetail]) -> PlayerStats:
    """
    Aggregate a player's lines across matches

    Matches the player does not appear in are ignored.

    Raises:
        NoQualifyingMatchesError: If the player appears in none of the matches
    """
    placements = []
    damage = eliminations = levels = 0
    game_types = {label: 0 for label in GAME_TYPE_LABELS.values()}
    game_types['Other'] = 0

    for detail in details:
        line = detail.participant(player.puuid)
        if line is None:
            continue
        placements.append(line.placement)
        damage += line.total_damage_to_players
        eliminations += line.players_eliminated
        levels += line.level
        game_types[GAME_TYPE_LABELS.get(detail.game_type, 'Other')] += 1

    games = len(placements)
    if not games:
        raise NoQualifyingMatchesError(
            f"{player.riot_id} absent from fetched matches",
            "❌ No recent matches found."
        )

    return PlayerStats(
        player=player,
        games=games,
        avg_placement=sum(placements) / games,
        top4_count=sum(1 for p in placements if p <= PlacementConstants.STANDARD_TOP_CUTOFF),
        wins=sum(1 for p in placements if p == 1),
        avg_damage=round(damage / games),
        avg_eliminations=eliminations / games,
        avg_level=levels / games,
        game_types=game_types,
        placement_counts={p: placements.count(p) for p in range(1, 9)},
    )

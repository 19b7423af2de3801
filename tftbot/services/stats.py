"""
Statistics service for the /tft-stats command.
"""

from tftbot.config import Config
from tftbot.data_models.history import PlayerStats
from tftbot.operations.stats import compute_player_stats
from tftbot.services.base import BaseService
from tftbot.utils.exceptions import NoQualifyingMatchesError
from tftbot.utils.logger import setup_logger
from tftbot.utils.riot_id import parse_riot_id

logger = setup_logger(__name__)


class StatsService(BaseService):
    """Aggregates a player's recent matches."""

    async def get_stats(self, riot_id: str, count: int) -> PlayerStats:
        """
        Compute quick statistics over the most recent matches.

        Raises:
            InvalidRiotIdError: Malformed Riot ID, nothing fetched
            UpstreamUnavailableError: Identity or match list fetch failed
            NoQualifyingMatchesError: No match could be loaded
        """
        parsed = parse_riot_id(riot_id)
        account, summoner = await self.get_player(parsed)
        ranked_display = await self.get_ranked_display(account.puuid, Config.RANKED_QUEUE_TYPE)
        player = self.build_header(account, summoner, ranked_display)

        match_ids = await self.get_match_ids(account.puuid, count)
        if not match_ids:
            raise NoQualifyingMatchesError(f"{account.riot_id} has no matches", "❌ No recent matches found.")

        details, skipped = await self.get_match_details(match_ids)
        stats = compute_player_stats(player, (details[m] for m in match_ids if m in details))

        logger.info(f"Stats for {account.riot_id}: {stats.games} games, {len(skipped)} skipped")
        return stats

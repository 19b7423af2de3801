"""
Climb service for the /tft-climb command.

Fetches a player's recent Double Up matches, reconstructs the LP timeline
ending at their current rank and correlates the duo partners they queued with.
"""

import asyncio
from typing import List

from tftbot.config import Config
from tftbot.constants import PlacementConstants
from tftbot.data_models.climb import ClimbReport, MatchOutcome
from tftbot.data_models.riot import LeagueEntry
from tftbot.operations.outcomes import build_outcome
from tftbot.operations.partners import PartnerCorrelator, double_up_team_unit
from tftbot.operations.timeline import DOUBLE_UP_LP_TABLE, TimelineReconstructor
from tftbot.rendering.climb_graph import climb_image_urls, render_climb_graph
from tftbot.rendering.images import ImageLoader
from tftbot.services.base import BaseService
from tftbot.services.cache import TieredCacheManager
from tftbot.services.riot_client import RiotClient
from tftbot.utils.exceptions import NoQualifyingMatchesError, NoRankedDataError
from tftbot.utils.logger import setup_logger
from tftbot.utils.rank import RankPoint
from tftbot.utils.riot_id import parse_riot_id

logger = setup_logger(__name__)


class ClimbService(BaseService):
    """Builds climb reports from the Riot API."""

    def __init__(self, riot_client: RiotClient, caches: TieredCacheManager, image_loader: ImageLoader):
        super().__init__(riot_client, caches)
        self.image_loader = image_loader

    @staticmethod
    def pick_entry(entries: List[LeagueEntry], puuid: str) -> LeagueEntry:
        """
        Choose the Double Up queue entry, falling back to the first one listed.

        Raises:
            NoRankedDataError: If the player has no ranked entries at all
        """
        if not entries:
            raise NoRankedDataError(puuid)
        return next((e for e in entries if e.queue_type == Config.DOUBLE_UP_QUEUE_TYPE), entries[0])

    async def get_climb(self, riot_id: str, match_count: int) -> ClimbReport:
        """
        Build the climb report for a Riot ID.

        Args:
            riot_id: Raw ``Name#TAG`` input
            match_count: Most recent matches to consider

        Raises:
            InvalidRiotIdError: Malformed Riot ID, nothing fetched
            UpstreamUnavailableError: Identity, league or match list fetch failed
            NoRankedDataError: No ranked entry to anchor on
            NoQualifyingMatchesError: No Double Up match since the season start
        """
        parsed = parse_riot_id(riot_id)
        account, summoner = await self.get_player(parsed)

        entry = self.pick_entry(await self.get_league_entries(account.puuid), account.puuid)
        try:
            anchor = RankPoint.from_strings(entry.tier, entry.rank, entry.league_points)
        except ValueError as e:
            logger.warning(f"Unusable league entry for {account.riot_id}: {e}")
            raise NoRankedDataError(account.puuid) from e

        match_ids = await self.get_match_ids(account.puuid, match_count)
        if not match_ids:
            raise NoQualifyingMatchesError(f"{account.riot_id} has no matches", "❌ No matches found.")

        details, skipped = await self.get_match_details(match_ids)

        outcomes: List[MatchOutcome] = []
        for match_id in match_ids:
            detail = details.get(match_id)
            if detail is None:
                continue
            try:
                outcome = build_outcome(detail, account.puuid, DOUBLE_UP_LP_TABLE, double_up_team_unit)
            except ValueError as e:
                logger.warning(f"Skipping match {match_id}: {e}")
                skipped.append(match_id)
                continue
            if outcome is not None:
                outcomes.append(outcome)

        cutoff_ms = Config.season_cutoff_ms()
        timeline = TimelineReconstructor.reconstruct(anchor, outcomes, cutoff_ms, Config.DOUBLE_UP_GAME_TYPE)

        partners = await PartnerCorrelator(self.get_partner_identity).aggregate(timeline)
        summary = TimelineReconstructor.summarize(timeline, PlacementConstants.DOUBLE_UP_TOP_CUTOFF, cutoff_ms)

        logger.info(
            f"Climb for {account.riot_id}: {summary.game_count} games, "
            f"{summary.net_lp:+d} LP, {len(partners)} partners, {len(skipped)} skipped"
        )

        return ClimbReport(
            player=self.build_header(account, summoner, entry.display),
            timeline=timeline,
            partners=partners,
            summary=summary,
            skipped_matches=len(skipped),
        )

    async def render_graph(self, report: ClimbReport) -> bytes:
        """Download the graph's images and draw it off the event loop."""
        images = await self.image_loader.load_many(climb_image_urls(report))
        return await asyncio.to_thread(render_climb_graph, report, images)

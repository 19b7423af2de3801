"""
Base service class for the TFT climb bot.

Provides cached, read-through access to the Riot API that every command
service shares: identity lookups, match lists and match details.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Sequence, Tuple

from tftbot.data_models.climb import PartnerIdentity, PlayerHeader
from tftbot.data_models.riot import LeagueEntry, MatchDetail, RiotAccount, Summoner
from tftbot.services.cache import TieredCacheManager, TTLCache
from tftbot.services.riot_client import RiotClient
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger
from tftbot.utils.riot_id import RiotId

logger = setup_logger(__name__)

UNRANKED = "Unranked"


class BaseService:
    """Base class for all services with cached Riot API access."""

    def __init__(self, riot_client: RiotClient, caches: TieredCacheManager):
        """
        Initialize base service.

        Args:
            riot_client: Shared Riot API client
            caches: Process-wide cache tiers
        """
        self.riot = riot_client
        self.caches = caches

    async def cached(self, tier: TTLCache, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Read-through lookup: serve a live entry or await the loader and store its result."""
        return await tier.get_or_load(key, loader)

    async def get_account(self, riot_id: RiotId) -> RiotAccount:
        """Resolve a Riot ID to an account. Failures propagate and are not cached."""
        return await self.cached(
            self.caches.identity, ('account', riot_id.cache_key),
            lambda: self.riot.get_account_by_riot_id(riot_id.game_name, riot_id.tag_line)
        )

    async def get_summoner(self, puuid: str) -> Summoner:
        return await self.cached(
            self.caches.identity, ('summoner', puuid),
            lambda: self.riot.get_summoner_by_puuid(puuid)
        )

    async def get_player(self, riot_id: RiotId) -> Tuple[RiotAccount, Summoner]:
        account = await self.get_account(riot_id)
        summoner = await self.get_summoner(account.puuid)
        return account, summoner

    async def get_league_entries(self, puuid: str) -> List[LeagueEntry]:
        return await self.cached(
            self.caches.identity, ('league', puuid),
            lambda: self.riot.get_league_entries(puuid)
        )

    async def get_partner_identity(self, puuid: str) -> PartnerIdentity:
        """Display name and icon for a partner, fetched once while cached."""
        async def load() -> PartnerIdentity:
            summoner = await self.get_summoner(puuid)
            account = await self.riot.get_account_by_puuid(puuid)
            return PartnerIdentity(display_name=account.riot_id, icon_ref=summoner.profile_icon_id)

        return await self.cached(self.caches.identity, ('partner', puuid), load)

    async def get_match_ids(self, puuid: str, count: int) -> List[str]:
        return await self.cached(
            self.caches.match_lists, (puuid, count),
            lambda: self.riot.get_match_ids(puuid, count)
        )

    async def get_match_details(self, match_ids: Sequence[str]) -> Tuple[Dict[str, MatchDetail], List[str]]:
        """
        Fetch match details concurrently, skipping the ones that fail.

        Returns:
            (details keyed by match id, ids that were skipped)
        """
        async def fetch(match_id: str):
            try:
                return await self.cached(
                    self.caches.match_details, match_id, lambda: self.riot.get_match(match_id)
                )
            except ClimbBotError as e:
                logger.warning(f"Skipping match {match_id}: {e}")
                return None

        results = await asyncio.gather(*(fetch(match_id) for match_id in match_ids))

        details: Dict[str, MatchDetail] = {}
        skipped: List[str] = []
        for match_id, detail in zip(match_ids, results):
            if detail is None:
                skipped.append(match_id)
            else:
                details[match_id] = detail

        if skipped:
            logger.info(f"Fetched {len(details)} matches, skipped {len(skipped)}")
        return details, skipped

    @staticmethod
    def build_header(account: RiotAccount, summoner: Summoner, ranked_display: str) -> PlayerHeader:
        return PlayerHeader(
            riot_id=account.riot_id,
            puuid=account.puuid,
            profile_icon_id=summoner.profile_icon_id,
            ranked_display=ranked_display,
        )

    async def get_ranked_display(self, puuid: str, preferred_queue: str) -> str:
        """Rank line for embed headers; never fails the request."""
        try:
            entries = await self.get_league_entries(puuid)
        except ClimbBotError as e:
            logger.warning(f"Ranked lookup failed for {puuid}: {e}")
            return UNRANKED
        if not entries:
            return UNRANKED
        entry = next((e for e in entries if e.queue_type == preferred_queue), entries[0])
        return entry.display

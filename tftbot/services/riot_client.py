"""
Riot API client for TFT endpoints.

Thin aiohttp wrapper returning parsed records. Every failure (non-success
status, network error, unreadable body) is logged with the operation and
identifier and raised as UpstreamUnavailableError; nothing is retried. Callers
decide whether a failure aborts the request or skips one match.
"""

import asyncio
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp

from tftbot.config import Config
from tftbot.data_models.riot import LeagueEntry, MatchDetail, RiotAccount, Summoner
from tftbot.utils.exceptions import RecordParseError, UpstreamUnavailableError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class RiotClient:
    """Async client for the account, summoner, league and match endpoints."""

    def __init__(self, api_key: str = None, *, regional_host: str = None, platform_host: str = None,
                 max_concurrency: int = None, request_delay: float = None, timeout: float = None):
        self.api_key = api_key or Config.RIOT_API_KEY
        self.regional_host = regional_host or Config.RIOT_REGIONAL_HOST
        self.platform_host = platform_host or Config.RIOT_PLATFORM_HOST
        self.request_delay = Config.RIOT_REQUEST_DELAY if request_delay is None else request_delay
        self.timeout = aiohttp.ClientTimeout(total=timeout or Config.RIOT_TIMEOUT)
        self._semaphore = asyncio.Semaphore(max_concurrency or Config.RIOT_MAX_CONCURRENCY)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self):
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_json(self, url: str, operation: str, identifier: str, params: dict = None) -> Any:
        session = await self._get_session()
        headers = {"X-Riot-Token": self.api_key}

        async with self._semaphore:
            try:
                async with session.get(url, headers=headers, params=params) as response:
                    if response.status != 200:
                        logger.warning(f"Riot API {operation} for {identifier} returned {response.status}")
                        raise UpstreamUnavailableError(operation, identifier, response.status)
                    data = await response.json()
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(f"Riot API {operation} for {identifier} failed: {e}")
                raise UpstreamUnavailableError(operation, identifier) from e
            finally:
                # Pace sibling requests under the rate limit
                if self.request_delay:
                    await asyncio.sleep(self.request_delay)

        return data

    def _parse(self, parser, payload: Any, operation: str, identifier: str):
        try:
            return parser(payload)
        except RecordParseError as e:
            logger.warning(f"Riot API {operation} for {identifier} returned a malformed record: {e}")
            raise

    def _regional(self, path: str) -> str:
        return f"https://{self.regional_host}{path}"

    def _platform(self, path: str) -> str:
        return f"https://{self.platform_host}{path}"

    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> RiotAccount:
        url = self._regional(
            f"/riot/account/v1/accounts/by-riot-id/{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
        )
        identifier = f"{game_name}#{tag_line}"
        payload = await self._get_json(url, "account", identifier)
        return self._parse(RiotAccount.from_json, payload, "account", identifier)

    async def get_account_by_puuid(self, puuid: str) -> RiotAccount:
        url = self._regional(f"/riot/account/v1/accounts/by-puuid/{puuid}")
        payload = await self._get_json(url, "account", puuid)
        return self._parse(RiotAccount.from_json, payload, "account", puuid)

    async def get_summoner_by_puuid(self, puuid: str) -> Summoner:
        url = self._platform(f"/tft/summoner/v1/summoners/by-puuid/{puuid}")
        payload = await self._get_json(url, "summoner", puuid)
        return self._parse(Summoner.from_json, payload, "summoner", puuid)

    async def get_league_entries(self, puuid: str) -> List[LeagueEntry]:
        url = self._platform(f"/tft/league/v1/by-puuid/{puuid}")
        payload = await self._get_json(url, "league", puuid)
        if not isinstance(payload, list):
            raise RecordParseError("league entries", "<root>", "expected a list")
        return [self._parse(LeagueEntry.from_json, entry, "league", puuid) for entry in payload]

    async def get_match_ids(self, puuid: str, count: int) -> List[str]:
        url = self._regional(f"/tft/match/v1/matches/by-puuid/{puuid}/ids")
        payload = await self._get_json(url, "match list", puuid, params={"count": count})
        if not isinstance(payload, list) or not all(isinstance(m, str) for m in payload):
            raise RecordParseError("match list", "<root>", "expected a list of ids")
        return payload

    async def get_match(self, match_id: str) -> MatchDetail:
        url = self._regional(f"/tft/match/v1/matches/{match_id}")
        payload = await self._get_json(url, "match", match_id)
        return self._parse(MatchDetail.from_json, payload, "match", match_id)

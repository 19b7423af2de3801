"""
Shared fixtures: a controllable clock, Riot JSON builders and a fake Riot client.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from tftbot.config import Config
from tftbot.data_models.riot import LeagueEntry, MatchDetail, RiotAccount, Summoner
from tftbot.services.cache import TieredCacheManager
from tftbot.utils.exceptions import UpstreamUnavailableError

SEASON_MS = 1_764_720_000_000  # 2025-12-03T00:00:00Z


class FakeClock:
    """Monotonic seconds that only move when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def participant_json(puuid: str, placement: int, **extra) -> dict:
    payload = {
        "puuid": puuid,
        "placement": placement,
        "level": 8,
        "players_eliminated": 1,
        "total_damage_to_players": 50,
        "units": [],
        "traits": [],
    }
    payload.update(extra)
    return payload


def match_json(match_id: str, timestamp: int, participants: List[dict], game_type: str = "pairs") -> dict:
    return {
        "metadata": {"match_id": match_id, "participants": [p["puuid"] for p in participants]},
        "info": {
            "game_datetime": timestamp,
            "tft_game_type": game_type,
            "queue_id": 1160 if game_type == "pairs" else 1100,
            "participants": participants,
        },
    }


def double_up_match(match_id: str, timestamp: int, player: str, player_placement: int,
                    partner: Optional[str]) -> MatchDetail:
    """Eight-player Double Up lobby with the partner sharing the player's team."""
    team_mate_placement = player_placement + 1 if player_placement % 2 else player_placement - 1
    participants = [participant_json(player, player_placement)]
    if partner:
        participants.append(participant_json(partner, team_mate_placement))
    taken = {p["placement"] for p in participants}
    filler = (p for p in range(1, 9) if p not in taken)
    participants.extend(participant_json(f"other-{match_id}-{p}", p) for p in filler)
    return MatchDetail.from_json(match_json(match_id, timestamp, participants))


class FakeRiotClient:
    """In-memory stand-in for RiotClient that records every call."""

    def __init__(self):
        self.accounts: Dict[str, RiotAccount] = {}
        self.summoners: Dict[str, Summoner] = {}
        self.league: Dict[str, List[LeagueEntry]] = {}
        self.match_ids: Dict[str, List[str]] = {}
        self.matches: Dict[str, MatchDetail] = {}
        self.failing: set = set()
        self.calls: List[tuple] = []

    def add_player(self, puuid: str, name: str, tag: str = "NA1", icon: int = 1):
        self.accounts[puuid] = RiotAccount(puuid, name, tag)
        self.summoners[puuid] = Summoner(puuid, icon, 100)

    def _fail_if(self, operation: str, identifier: str):
        if (operation, identifier) in self.failing:
            raise UpstreamUnavailableError(operation, identifier, 500)

    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> RiotAccount:
        self.calls.append(("account", f"{game_name}#{tag_line}"))
        await asyncio.sleep(0)
        for account in self.accounts.values():
            if account.game_name.lower() == game_name.lower() and account.tag_line.lower() == tag_line.lower():
                self._fail_if("account", account.puuid)
                return account
        raise UpstreamUnavailableError("account", f"{game_name}#{tag_line}", 404)

    async def get_account_by_puuid(self, puuid: str) -> RiotAccount:
        self.calls.append(("account", puuid))
        await asyncio.sleep(0)
        self._fail_if("account", puuid)
        if puuid not in self.accounts:
            raise UpstreamUnavailableError("account", puuid, 404)
        return self.accounts[puuid]

    async def get_summoner_by_puuid(self, puuid: str) -> Summoner:
        self.calls.append(("summoner", puuid))
        await asyncio.sleep(0)
        self._fail_if("summoner", puuid)
        if puuid not in self.summoners:
            raise UpstreamUnavailableError("summoner", puuid, 404)
        return self.summoners[puuid]

    async def get_league_entries(self, puuid: str) -> List[LeagueEntry]:
        self.calls.append(("league", puuid))
        self._fail_if("league", puuid)
        return self.league.get(puuid, [])

    async def get_match_ids(self, puuid: str, count: int) -> List[str]:
        self.calls.append(("match list", puuid))
        self._fail_if("match list", puuid)
        return self.match_ids.get(puuid, [])[:count]

    async def get_match(self, match_id: str) -> MatchDetail:
        self.calls.append(("match", match_id))
        await asyncio.sleep(0)
        self._fail_if("match", match_id)
        return self.matches[match_id]

    def count(self, operation: str, identifier: str) -> int:
        return self.calls.count((operation, identifier))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def caches(clock):
    return TieredCacheManager(clock=clock)


@pytest.fixture
def riot():
    return FakeRiotClient()


class FakeImageLoader:
    """Every download fails, so renderers draw placeholders."""

    def __init__(self):
        self.requested = []

    async def load_many(self, urls):
        self.requested.extend(urls)
        return {}


@pytest.fixture
def season_start(monkeypatch):
    monkeypatch.setattr(Config, "SEASON_START", "2025-12-03")


@pytest.fixture
def climber(riot, season_start):
    """Gold II 40 LP player with two Double Up games since the season start."""
    riot.add_player("me", "Climber")
    riot.add_player("mate", "Buddy", icon=7)
    riot.league["me"] = [
        LeagueEntry("RANKED_TFT", "PLATINUM", "I", 10),
        LeagueEntry("RANKED_TFT_DOUBLE_UP", "GOLD", "II", 40),
    ]
    # Newest first, like the match list endpoint
    riot.match_ids["me"] = ["NA1_3", "NA1_2", "NA1_1"]
    riot.matches["NA1_3"] = double_up_match("NA1_3", SEASON_MS + 3_000, "me", 5, "mate")  # team 3: -15
    riot.matches["NA1_2"] = double_up_match("NA1_2", SEASON_MS + 2_000, "me", 2, "mate")  # team 1: +35
    riot.matches["NA1_1"] = double_up_match("NA1_1", SEASON_MS - 1, "me", 1, "mate")      # last season
    return riot

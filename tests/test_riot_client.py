"""
Tests for RiotClient request building and response parsing.
"""

import pytest

from tftbot.services.riot_client import RiotClient
from tftbot.utils.exceptions import RecordParseError, UpstreamUnavailableError

from tests.conftest import match_json, participant_json


class StubbedClient(RiotClient):
    """RiotClient whose HTTP layer returns canned payloads."""

    def __init__(self, payloads):
        super().__init__("key", regional_host="americas.test", platform_host="na1.test",
                         max_concurrency=2, request_delay=0, timeout=1)
        self.payloads = payloads
        self.requests = []

    async def _get_json(self, url, operation, identifier, params=None):
        self.requests.append((url, operation, identifier, params))
        payload = self.payloads.get(operation)
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.mark.asyncio
async def test_account_lookup_quotes_name():
    client = StubbedClient({"account": {"puuid": "p1", "gameName": "Big Cheese", "tagLine": "NA1"}})

    account = await client.get_account_by_riot_id("Big Cheese", "NA1")

    assert account.puuid == "p1"
    url, operation, identifier, _ = client.requests[0]
    assert url == "https://americas.test/riot/account/v1/accounts/by-riot-id/Big%20Cheese/NA1"
    assert identifier == "Big Cheese#NA1"


@pytest.mark.asyncio
async def test_match_ids_pass_count():
    client = StubbedClient({"match list": ["NA1_2", "NA1_1"]})

    assert await client.get_match_ids("p1", 2) == ["NA1_2", "NA1_1"]
    assert client.requests[0][3] == {"count": 2}


@pytest.mark.asyncio
async def test_match_list_must_be_strings():
    client = StubbedClient({"match list": [1, 2]})

    with pytest.raises(RecordParseError):
        await client.get_match_ids("p1", 2)


@pytest.mark.asyncio
async def test_league_entries_use_platform_host():
    client = StubbedClient({"league": [
        {"queueType": "RANKED_TFT_DOUBLE_UP", "tier": "GOLD", "rank": "II", "leaguePoints": 40}
    ]})

    entries = await client.get_league_entries("p1")

    assert entries[0].league_points == 40
    assert client.requests[0][0] == "https://na1.test/tft/league/v1/by-puuid/p1"


@pytest.mark.asyncio
async def test_malformed_match_raises_parse_error():
    payload = match_json("NA1_1", 1, [participant_json("p1", 1)])
    del payload["info"]["game_datetime"]
    client = StubbedClient({"match": payload})

    with pytest.raises(RecordParseError):
        await client.get_match("NA1_1")


@pytest.mark.asyncio
async def test_upstream_failure_propagates():
    client = StubbedClient({"summoner": UpstreamUnavailableError("summoner", "p1", 404)})

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await client.get_summoner_by_puuid("p1")

    assert exc_info.value.status == 404
    assert exc_info.value.user_message == "❌ Summoner not found for this region."

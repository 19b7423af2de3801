"""
Tests for duo partner pairing and aggregation.
"""

import asyncio

import pytest

from tftbot.data_models.climb import PartnerIdentity, TimelinePoint
from tftbot.data_models.riot import MatchParticipant
from tftbot.operations.outcomes import build_outcome
from tftbot.operations.partners import (
    PartnerCorrelator, count_partners, double_up_team_unit, find_partner, solo_team_unit,
)
from tftbot.operations.timeline import DOUBLE_UP_LP_TABLE
from tftbot.services.base import BaseService
from tftbot.utils.exceptions import UpstreamUnavailableError
from tftbot.utils.rank import from_total

from tests.conftest import double_up_match


def point(index, partner_id):
    return TimelinePoint(game_index=index, total_lp=1400 + index, rank=from_total(1400 + index),
                         placement=1, lp_delta=35, partner_id=partner_id)


def start_point():
    return TimelinePoint(game_index=0, total_lp=1400, rank=from_total(1400))


class RecordingResolver:
    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)

    async def __call__(self, puuid):
        self.calls.append(puuid)
        await asyncio.sleep(0)
        if puuid in self.failing:
            raise UpstreamUnavailableError("account", puuid, 500)
        return PartnerIdentity(display_name=f"{puuid.upper()}#NA1", icon_ref=7)


class TestPairing:

    def test_team_units(self):
        assert [double_up_team_unit(p) for p in range(1, 9)] == [1, 1, 2, 2, 3, 3, 4, 4]
        assert solo_team_unit(5) == 5

    def test_finds_team_mate(self):
        participants = [
            MatchParticipant("me", 3), MatchParticipant("them", 1),
            MatchParticipant("mate", 4), MatchParticipant("other", 2),
        ]

        assert find_partner(participants, "me", double_up_team_unit).puuid == "mate"

    def test_no_partner_in_solo_mode(self):
        participants = [MatchParticipant("me", 3), MatchParticipant("other", 4)]

        assert find_partner(participants, "me", solo_team_unit) is None

    def test_player_absent(self):
        assert find_partner([MatchParticipant("other", 1)], "me", double_up_team_unit) is None

    def test_build_outcome_uses_team_placement(self):
        detail = double_up_match("m1", 2_000, "me", 4, "mate")

        outcome = build_outcome(detail, "me", DOUBLE_UP_LP_TABLE, double_up_team_unit)

        assert outcome.team_placement == 2
        assert outcome.lp_delta == 15
        assert outcome.partner_id == "mate"
        assert outcome.game_type == "pairs"

    def test_build_outcome_player_absent(self):
        detail = double_up_match("m1", 2_000, "someone", 1, "mate")

        assert build_outcome(detail, "me", DOUBLE_UP_LP_TABLE, double_up_team_unit) is None


class TestAggregation:

    def test_counts_in_first_appearance_order(self):
        timeline = [start_point(), point(1, "y"), point(2, "x"), point(3, None), point(4, "x")]

        assert list(count_partners(timeline).items()) == [("y", 1), ("x", 2)]

    @pytest.mark.asyncio
    async def test_most_frequent_first_and_each_resolved_once(self):
        resolver = RecordingResolver()
        timeline = [start_point(), point(1, "x"), point(2, "y"), point(3, "x")]

        partners = await PartnerCorrelator(resolver).aggregate(timeline)

        assert [(p.partner_id, p.game_count) for p in partners] == [("x", 2), ("y", 1)]
        assert partners[0].display_name == "X#NA1"
        assert sorted(resolver.calls) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_failed_identity_keeps_opaque_id(self):
        resolver = RecordingResolver(failing={"y"})
        timeline = [start_point(), point(1, "x"), point(2, "y")]

        partners = await PartnerCorrelator(resolver).aggregate(timeline)

        failed = next(p for p in partners if p.partner_id == "y")
        assert failed.display_name is None
        assert failed.label == "y"

    @pytest.mark.asyncio
    async def test_no_partners(self):
        resolver = RecordingResolver()

        assert await PartnerCorrelator(resolver).aggregate([start_point()]) == ()
        assert resolver.calls == []

    @pytest.mark.asyncio
    async def test_identity_fetched_once_across_requests(self, riot, caches):
        riot.add_player("x", "Xavier", icon=42)
        service = BaseService(riot, caches)
        timeline = [start_point(), point(1, "x"), point(2, "x")]

        first, second = await asyncio.gather(
            PartnerCorrelator(service.get_partner_identity).aggregate(timeline),
            PartnerCorrelator(service.get_partner_identity).aggregate(timeline),
        )

        assert first == second
        assert first[0].display_name == "Xavier#NA1"
        assert first[0].icon_ref == 42
        assert riot.count("account", "x") == 1
        assert riot.count("summoner", "x") == 1

"""
Service tests against a fake Riot client.
"""

import pytest

from tftbot.config import Config
from tftbot.data_models.riot import LeagueEntry
from tftbot.services.climb import ClimbService
from tftbot.services.match_history import MatchHistoryService
from tftbot.services.session import Direction, NavigationAction, SessionManager
from tftbot.services.stats import StatsService
from tftbot.utils.exceptions import (
    InvalidRiotIdError, NoQualifyingMatchesError, NoRankedDataError,
    OutOfRangeError, SessionExpiredError, UpstreamUnavailableError,
)
from tftbot.utils.rank import Division, RankPoint, Tier

from tests.conftest import FakeImageLoader

PNG_MAGIC = b"\x89PNG"

pytestmark = pytest.mark.usefixtures("season_start")


class TestClimbService:

    @pytest.mark.asyncio
    async def test_builds_report(self, climber, caches):
        service = ClimbService(climber, caches, FakeImageLoader())

        report = await service.get_climb("Climber#NA1", 20)

        assert [p.total_lp for p in report.timeline] == [1420, 1455, 1440]
        assert report.summary.end_rank == RankPoint(Tier.GOLD, Division.II, 40)
        assert report.summary.game_count == 2
        assert report.player.ranked_display == "GOLD II - 40 LP"
        assert [(p.partner_id, p.game_count, p.display_name) for p in report.partners] == [
            ("mate", 2, "Buddy#NA1")
        ]
        assert report.skipped_matches == 0

    @pytest.mark.asyncio
    async def test_failed_match_is_skipped(self, climber, caches):
        climber.failing.add(("match", "NA1_3"))
        service = ClimbService(climber, caches, FakeImageLoader())

        report = await service.get_climb("Climber#NA1", 20)

        assert report.summary.game_count == 1
        assert report.skipped_matches == 1

    @pytest.mark.asyncio
    async def test_identity_failure_aborts(self, climber, caches):
        climber.failing.add(("summoner", "me"))
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(UpstreamUnavailableError):
            await service.get_climb("Climber#NA1", 20)

    @pytest.mark.asyncio
    async def test_unknown_player(self, climber, caches):
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await service.get_climb("Nobody#NA1", 20)

        assert "not found" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_malformed_riot_id_fetches_nothing(self, climber, caches):
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(InvalidRiotIdError):
            await service.get_climb("Climber", 20)

        assert climber.calls == []

    @pytest.mark.asyncio
    async def test_unranked(self, climber, caches):
        climber.league["me"] = []
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(NoRankedDataError):
            await service.get_climb("Climber#NA1", 20)

    @pytest.mark.asyncio
    async def test_falls_back_to_first_entry(self, climber, caches):
        climber.league["me"] = [LeagueEntry("RANKED_TFT", "PLATINUM", "I", 10)]
        service = ClimbService(climber, caches, FakeImageLoader())

        report = await service.get_climb("Climber#NA1", 20)

        assert report.summary.end_rank == RankPoint(Tier.PLATINUM, Division.I, 10)

    @pytest.mark.asyncio
    async def test_no_matches_this_season(self, climber, caches):
        climber.match_ids["me"] = ["NA1_1"]
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(NoQualifyingMatchesError):
            await service.get_climb("Climber#NA1", 20)

    @pytest.mark.asyncio
    async def test_empty_match_list(self, climber, caches):
        climber.match_ids["me"] = []
        service = ClimbService(climber, caches, FakeImageLoader())

        with pytest.raises(NoQualifyingMatchesError):
            await service.get_climb("Climber#NA1", 20)

    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(self, climber, caches):
        service = ClimbService(climber, caches, FakeImageLoader())

        await service.get_climb("Climber#NA1", 20)
        await service.get_climb("climber#na1", 20)

        assert climber.count("match", "NA1_2") == 1
        assert climber.count("account", "mate") == 1
        assert climber.count("account", "Climber#NA1") == 1

    @pytest.mark.asyncio
    async def test_render_graph(self, climber, caches):
        loader = FakeImageLoader()
        service = ClimbService(climber, caches, loader)
        report = await service.get_climb("Climber#NA1", 20)

        image = await service.render_graph(report)

        assert image.startswith(PNG_MAGIC)
        assert loader.requested


class TestMatchHistoryService:

    def make_service(self, riot, caches):
        return MatchHistoryService(riot, caches, SessionManager(caches.sessions), FakeImageLoader())

    @pytest.mark.asyncio
    async def test_browse_and_navigate(self, climber, caches):
        service = self.make_service(climber, caches)

        frame = await service.start(42, "Climber#NA1", 5)

        assert (frame.cursor, frame.total) == (0, 3)
        assert frame.detail.match_id == "NA1_3"
        assert frame.image.startswith(PNG_MAGIC)
        assert not frame.has_previous and frame.has_next
        assert frame.player.ranked_display == "PLATINUM I - 10 LP"

        calls_before = len(climber.calls)
        second = await service.navigate(NavigationAction(frame.session_key, Direction.NEXT))

        assert second.cursor == 1
        assert second.detail.match_id == "NA1_2"
        assert len(climber.calls) == calls_before

    @pytest.mark.asyncio
    async def test_frames_are_cached(self, climber, caches):
        service = self.make_service(climber, caches)
        frame = await service.start(42, "Climber#NA1", 5)

        await service.navigate(NavigationAction(frame.session_key, Direction.NEXT))
        back = await service.navigate(NavigationAction(frame.session_key, Direction.PREVIOUS))

        assert back.image == frame.image
        assert caches.frames.hits >= 1

    @pytest.mark.asyncio
    async def test_out_of_range(self, climber, caches):
        service = self.make_service(climber, caches)
        frame = await service.start(42, "Climber#NA1", 5)

        with pytest.raises(OutOfRangeError):
            await service.navigate(NavigationAction(frame.session_key, Direction.PREVIOUS))

    @pytest.mark.asyncio
    async def test_expired_session(self, climber, caches, clock):
        service = self.make_service(climber, caches)
        frame = await service.start(42, "Climber#NA1", 5)

        clock.advance(Config.SESSION_TTL + 1)

        with pytest.raises(SessionExpiredError):
            await service.navigate(NavigationAction(frame.session_key, Direction.NEXT))

    @pytest.mark.asyncio
    async def test_failed_matches_are_left_out(self, climber, caches):
        climber.failing.add(("match", "NA1_2"))
        service = self.make_service(climber, caches)

        frame = await service.start(42, "Climber#NA1", 5)

        assert frame.total == 2

    @pytest.mark.asyncio
    async def test_ranked_lookup_failure_is_soft(self, climber, caches):
        climber.failing.add(("league", "me"))
        service = self.make_service(climber, caches)

        frame = await service.start(42, "Climber#NA1", 5)

        assert frame.player.ranked_display == "Unranked"

    @pytest.mark.asyncio
    async def test_no_matches(self, climber, caches):
        climber.match_ids["me"] = []
        service = self.make_service(climber, caches)

        with pytest.raises(NoQualifyingMatchesError):
            await service.start(42, "Climber#NA1", 5)


class TestStatsService:

    @pytest.mark.asyncio
    async def test_stats(self, climber, caches):
        stats = await StatsService(climber, caches).get_stats("Climber#NA1", 20)

        assert stats.games == 3
        assert stats.avg_placement == pytest.approx((5 + 2 + 1) / 3)
        assert stats.top4_count == 2
        assert stats.wins == 1
        assert stats.game_types["Double Up"] == 3
        assert stats.placement_counts[5] == 1

    @pytest.mark.asyncio
    async def test_match_list_failure_aborts(self, climber, caches):
        climber.failing.add(("match list", "me"))

        with pytest.raises(UpstreamUnavailableError):
            await StatsService(climber, caches).get_stats("Climber#NA1", 20)

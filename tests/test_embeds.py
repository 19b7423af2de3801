"""
Tests for embed builders, error embeds and the match board renderer.
"""

from tftbot.data_models.climb import ClimbReport, PartnerAggregate, PlayerHeader
from tftbot.data_models.history import MatchFrame
from tftbot.data_models.riot import MatchParticipant, TraitRecord, UnitRecord
from tftbot.operations.stats import compute_player_stats
from tftbot.operations.timeline import TimelineReconstructor
from tftbot.rendering.match_board import board_image_urls, render_match_board
from tftbot.utils.embeds import build_climb_embed, build_match_embed, build_stats_embed, format_traits
from tftbot.utils.error_embeds import ErrorEmbeds
from tftbot.utils.exceptions import SessionExpiredError, UpstreamUnavailableError
from tftbot.utils.rank import Division, RankPoint, Tier

from tests.conftest import double_up_match
from tests.test_timeline import outcome

PLAYER = PlayerHeader(riot_id="Me#NA1", puuid="me", profile_icon_id=29, ranked_display="GOLD II - 40 LP")


def climb_report(partners=()):
    timeline = TimelineReconstructor.reconstruct(
        RankPoint(Tier.GOLD, Division.II, 40),
        [outcome("m1", 2_000, 35, placement=1), outcome("m2", 3_000, -15, placement=3)],
        1_000, "pairs"
    )
    return ClimbReport(
        player=PLAYER,
        timeline=timeline,
        partners=tuple(partners),
        summary=TimelineReconstructor.summarize(timeline, 2, 1_764_720_000_000),
    )


def field(embed, name):
    return next(f.value for f in embed.fields if f.name == name)


class TestClimbEmbed:

    def test_summary_fields(self):
        embed = build_climb_embed(climb_report([PartnerAggregate("x", 2, "Buddy#NA1"), PartnerAggregate("y", 1)]))

        assert embed.title == "📈 Double Up Ranked Climb - Last 2 Games"
        assert "**Net LP Change:** +20 LP" in embed.description
        assert "Top 2 Rate: 50.0%" in field(embed, "📊 Placements")
        assert "Avg LP/Game: +10.0" in field(embed, "📈 Performance")
        assert field(embed, "👥 Top Duo Partners") == "Buddy#NA1 (2 games)\ny (1 games)"
        assert embed.image.url == "attachment://climb.png"
        assert "Dec 03, 2025" in embed.footer.text

    def test_no_partners(self):
        embed = build_climb_embed(climb_report())

        assert field(embed, "👥 Top Duo Partners") == "None"


class TestMatchEmbed:

    def test_double_up_page(self):
        detail = double_up_match("NA1_1", 1_765_000_000_000, "me", 3, "mate")
        frame = MatchFrame("tft_1_2", 1, 5, PLAYER, detail, detail.participant("me"), b"png")

        embed = build_match_embed(frame)

        assert embed.title == "Double Up - 2nd Place"
        assert embed.footer.text == "Match 2 of 5"
        assert embed.author.name == "Me#NA1 - GOLD II - 40 LP"

    def test_trait_grouping(self):
        traits = [TraitRecord("TFT16_A", 6, 3), TraitRecord("TFT16_B", 4, 2),
                  TraitRecord("TFT16_C", 2, 1), TraitRecord("TFT16_D", 3, 1)]

        assert format_traits(traits) == "🏆 A (6)\n🥈 B (4)\n🥉 C (2) • D (3)"

    def test_no_traits(self):
        assert format_traits([]) == "None"


class TestStatsEmbed:

    def test_fields(self):
        details = [double_up_match(f"NA1_{p}", 2_000, "me", p, None) for p in (1, 4, 6)]
        stats = compute_player_stats(PLAYER, details)

        embed = build_stats_embed(stats)

        assert embed.title == "📊 TFT Statistics - Last 3 Games"
        assert "Wins: 1 (33.3%)" in field(embed, "🏆 Win Stats")
        assert "Avg Placement: 3.67" in field(embed, "📈 Performance")
        assert "Double Up: 3" in field(embed, "🎮 Game Modes")


class TestErrorEmbeds:

    def test_uses_user_message(self):
        embed = ErrorEmbeds.from_error(SessionExpiredError("tft_1_2"))

        assert embed.description == "❌ Session expired. Please run /tft again."

    def test_rate_limit_message(self):
        embed = ErrorEmbeds.from_error(UpstreamUnavailableError("match list", "me", 429))

        assert embed.title == "Riot API Error"
        assert "rate limiting" in embed.description


class TestMatchBoard:

    def test_renders_placeholders_without_images(self):
        participant = MatchParticipant(
            "me", 1,
            units=tuple(UnitRecord(f"TFT16_Unit{i}", 1 + i % 3) for i in range(12)),
        )

        image = render_match_board(participant, {})

        assert image.startswith(b"\x89PNG")

    def test_requests_at_most_ten_champions(self):
        participant = MatchParticipant("me", 1, units=tuple(UnitRecord(f"TFT16_U{i}", 1) for i in range(12)))

        urls = board_image_urls(participant)

        assert sum("championsplashes" in url for url in urls) == 10

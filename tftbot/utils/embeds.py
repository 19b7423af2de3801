"""
Shared embed utilities for the TFT climb bot.

Builds the climb, match and statistics embeds from the service layer's data
models so cogs and views format everything the same way.
"""

from datetime import datetime, timezone
from typing import List

import discord

from tftbot.constants import PlacementConstants, UIConstants
from tftbot.data_models.climb import ClimbReport, PlayerHeader
from tftbot.data_models.history import MatchFrame, PlayerStats
from tftbot.data_models.riot import TraitRecord
from tftbot.operations.partners import double_up_team_unit
from tftbot.operations.stats import GAME_TYPE_LABELS
from tftbot.rendering.climb_graph import profile_icon_url
from tftbot.utils.rank import format_rank

CLIMB_IMAGE_NAME = "climb.png"
MATCH_IMAGE_NAME = "match.png"


def _ordinal(placement: int) -> str:
    return f"{placement}{PlacementConstants.PLACEMENT_SUFFIX.get(placement, 'th')}"


def _set_player_author(embed: discord.Embed, player: PlayerHeader, with_rank: bool = False):
    name = f"{player.riot_id} - {player.ranked_display}" if with_rank else player.riot_id
    embed.set_author(name=name, icon_url=profile_icon_url(player.profile_icon_id))


def format_traits(traits: List[TraitRecord]) -> str:
    """Group active traits into gold, silver and bronze lines."""
    groups = {3: [], 2: [], 1: []}
    for trait in traits:
        bucket = 3 if trait.tier_current >= 3 else trait.tier_current
        groups[bucket].append(f"{trait.clean_name} ({trait.num_units})")

    lines = []
    for bucket, icon in ((3, "🏆"), (2, "🥈"), (1, "🥉")):
        if groups[bucket]:
            lines.append(f"{icon} {' • '.join(groups[bucket])}")
    return "\n".join(lines) or "None"


def build_climb_embed(report: ClimbReport) -> discord.Embed:
    """
    Build the /tft-climb summary embed.

    The climb graph is attached separately as ``climb.png``.
    """
    summary = report.summary
    counts = summary.placement_counts
    sign = "+" if summary.net_lp >= 0 else ""

    embed = discord.Embed(
        title=f"📈 Double Up Ranked Climb - Last {summary.game_count} Games",
        description=(
            f"**Starting Rank:** {format_rank(summary.start_rank)}\n"
            f"**Current Rank:** {format_rank(summary.end_rank)}\n"
            f"**Net LP Change:** {sign}{summary.net_lp} LP"
        ),
        color=UIConstants.GAIN_COLOR if summary.net_lp >= 0 else UIConstants.LOSS_COLOR,
        timestamp=datetime.now(timezone.utc)
    )
    _set_player_author(embed, report.player)

    placements = "\n".join(f"{_ordinal(p)}s: {counts.get(p, 0)}" for p in range(1, 5))
    embed.add_field(
        name="📊 Placements",
        value=f"{placements}\nTop 2 Rate: {summary.top_rate:.1f}%",
        inline=True
    )

    avg = summary.avg_lp_per_game
    embed.add_field(
        name="📈 Performance",
        value=f"Avg LP/Game: {'+' if avg >= 0 else ''}{avg:.1f}\nTotal Games: {summary.game_count}",
        inline=True
    )

    partners = report.top_partners(UIConstants.TOP_PARTNER_COUNT)
    embed.add_field(
        name="👥 Top Duo Partners",
        value="\n".join(f"{p.label} ({p.game_count} games)" for p in partners) or "None",
        inline=True
    )

    embed.set_image(url=f"attachment://{CLIMB_IMAGE_NAME}")

    season_start = datetime.fromtimestamp(summary.cutoff_ms / 1000, tz=timezone.utc)
    footer = f"Analyzing {summary.game_count} Double Up matches since {season_start:%b %d, %Y}"
    if report.skipped_matches:
        footer += f" ({report.skipped_matches} could not be loaded)"
    embed.set_footer(text=footer)
    return embed


def build_match_embed(frame: MatchFrame) -> discord.Embed:
    """
    Build one page of the /tft match browser.

    The board image is attached separately as ``match.png``.
    """
    detail = frame.detail
    participant = frame.participant

    mode = GAME_TYPE_LABELS.get(detail.game_type, "Ranked")
    placement = double_up_team_unit(participant.placement) if detail.is_double_up else participant.placement

    embed = discord.Embed(
        title=f"{mode} - {_ordinal(placement)} Place",
        description=(
            f"**Level:** {participant.level} | **Eliminations:** {participant.players_eliminated} | "
            f"**Damage:** {participant.total_damage_to_players}\n\n"
            f"**Traits:**\n{format_traits(participant.active_traits)}"
        ),
        color=PlacementConstants.PLACEMENT_COLORS.get(participant.placement, UIConstants.DEFAULT_EMBED_COLOR),
        timestamp=datetime.fromtimestamp(detail.game_datetime / 1000, tz=timezone.utc)
    )
    _set_player_author(embed, frame.player, with_rank=True)
    embed.set_image(url=f"attachment://{MATCH_IMAGE_NAME}")
    embed.set_footer(text=f"Match {frame.cursor + 1} of {frame.total}")
    return embed


def _stats_color(avg_placement: float) -> int:
    if avg_placement <= 3.0:
        return 0xFFD700
    if avg_placement <= 4.0:
        return 0xC0C0C0
    if avg_placement <= 5.0:
        return 0xCD7F32
    return 0x808080


def build_stats_embed(stats: PlayerStats) -> discord.Embed:
    """Build the /tft-stats embed."""
    embed = discord.Embed(
        title=f"📊 TFT Statistics - Last {stats.games} Games",
        description=f"**Current Rank:** {stats.player.ranked_display}",
        color=_stats_color(stats.avg_placement),
        timestamp=datetime.now(timezone.utc)
    )
    _set_player_author(embed, stats.player)

    embed.add_field(
        name="🏆 Win Stats",
        value=(
            f"Wins: {stats.wins} ({stats.win_rate:.1f}%)\n"
            f"Top 4s: {stats.top4_count} ({stats.top4_rate:.1f}%)"
        ),
        inline=True
    )
    embed.add_field(
        name="📈 Performance",
        value=(
            f"Avg Placement: {stats.avg_placement:.2f}\n"
            f"Avg Level: {stats.avg_level:.1f}\n"
            f"Avg Damage: {stats.avg_damage:,}"
        ),
        inline=True
    )
    embed.add_field(
        name="⚔️ Combat",
        value=f"Avg Eliminations: {stats.avg_eliminations:.1f}",
        inline=True
    )

    if stats.placement_counts:
        rows = []
        for placement, count in sorted(stats.placement_counts.items()):
            square = "🟩" if placement <= PlacementConstants.STANDARD_TOP_CUTOFF else "🟥"
            bar = square * max(1, round(count / stats.games * 10))
            rows.append(f"{_ordinal(placement)}: {bar} ({count})")
        embed.add_field(name="📍 Placement Distribution", value="\n".join(rows), inline=False)

    embed.add_field(
        name="🎮 Game Modes",
        value="\n".join(f"{label}: {count}" for label, count in stats.game_types.items()),
        inline=True
    )
    embed.set_footer(text=f"Analyzing {stats.games} recent matches")
    return embed

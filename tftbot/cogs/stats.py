"""
Quick statistics command.
"""

import asyncio

import discord
from discord.ext import commands
from discord import app_commands

from tftbot.config import Config
from tftbot.services.rate_limiter import rate_limit
from tftbot.services.stats import StatsService
from tftbot.utils.embeds import build_stats_embed
from tftbot.utils.error_embeds import ErrorEmbeds
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class StatsCog(commands.Cog):
    """Aggregate statistics over recent matches."""

    def __init__(self, bot):
        self.bot = bot
        self.stats_service = StatsService(bot.riot_client, bot.caches)

    @app_commands.command(name="tft-stats", description="Quick statistics over a player's recent TFT matches")
    @app_commands.describe(
        riotid="Riot ID in Name#TAG form (e.g., Doublelift#NA1)",
        matches=f"Number of matches to analyze ({Config.STATS_MIN_MATCHES}-{Config.STATS_MAX_MATCHES})"
    )
    @rate_limit("tft-stats", limit=3, window=60)
    async def tft_stats(self, interaction: discord.Interaction, riotid: str,
                        matches: app_commands.Range[int, Config.STATS_MIN_MATCHES, Config.STATS_MAX_MATCHES]
                        = Config.STATS_DEFAULT_MATCHES):
        await interaction.response.defer()

        try:
            stats = await asyncio.wait_for(
                self.stats_service.get_stats(riotid, matches),
                timeout=Config.COMMAND_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(f"/tft-stats for {riotid} timed out")
            await interaction.followup.send(embed=ErrorEmbeds.timed_out(), ephemeral=True)
            return
        except ClimbBotError as e:
            logger.info(f"/tft-stats for {riotid} failed: {e}")
            await interaction.followup.send(embed=ErrorEmbeds.from_error(e), ephemeral=True)
            return
        except Exception as e:
            logger.error(f"Error in tft-stats command for {riotid}: {e}", exc_info=True)
            await interaction.followup.send(
                embed=ErrorEmbeds.command_error("An error occurred while fetching statistics."),
                ephemeral=True
            )
            return

        await interaction.followup.send(embed=build_stats_embed(stats))


async def setup(bot):
    await bot.add_cog(StatsCog(bot))

"""
Double Up climb command.

/tft-climb reconstructs a player's LP history since the season start and
renders it as a graph with their most frequent duo partners.
"""

import asyncio
import io

import discord
from discord.ext import commands
from discord import app_commands

from tftbot.config import Config
from tftbot.services.climb import ClimbService
from tftbot.utils.embeds import CLIMB_IMAGE_NAME, build_climb_embed
from tftbot.utils.error_embeds import ErrorEmbeds
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class ClimbCog(commands.Cog):
    """Ranked climb visualization."""

    def __init__(self, bot):
        self.bot = bot
        self.climb_service = ClimbService(bot.riot_client, bot.caches, bot.image_loader)

    @app_commands.command(name="tft-climb", description="Visualize a player's Double Up ranked climb")
    @app_commands.describe(
        riotid="Riot ID in Name#TAG form (e.g., Doublelift#NA1)",
        matches=f"Number of recent matches to analyze ({Config.CLIMB_MIN_MATCHES}-{Config.CLIMB_MAX_MATCHES})"
    )
    @app_commands.checks.cooldown(rate=1, per=30.0, key=lambda i: i.user.id)
    async def tft_climb(self, interaction: discord.Interaction, riotid: str,
                        matches: app_commands.Range[int, Config.CLIMB_MIN_MATCHES, Config.CLIMB_MAX_MATCHES]
                        = Config.CLIMB_DEFAULT_MATCHES):
        """Show the climb graph and summary for a Riot ID."""
        await interaction.response.defer()

        try:
            report = await asyncio.wait_for(
                self.climb_service.get_climb(riotid, matches),
                timeout=Config.COMMAND_TIMEOUT
            )
            graph = await self.climb_service.render_graph(report)
        except asyncio.TimeoutError:
            logger.warning(f"/tft-climb for {riotid} timed out")
            await interaction.followup.send(embed=ErrorEmbeds.timed_out(), ephemeral=True)
            return
        except ClimbBotError as e:
            logger.info(f"/tft-climb for {riotid} failed: {e}")
            await interaction.followup.send(embed=ErrorEmbeds.from_error(e), ephemeral=True)
            return
        except Exception as e:
            logger.error(f"Error in tft-climb command for {riotid}: {e}", exc_info=True)
            await interaction.followup.send(
                embed=ErrorEmbeds.command_error("An error occurred while generating the climb visualization."),
                ephemeral=True
            )
            return

        await interaction.followup.send(
            embed=build_climb_embed(report),
            file=discord.File(io.BytesIO(graph), filename=CLIMB_IMAGE_NAME)
        )

    @tft_climb.error
    async def tft_climb_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle errors for the climb command, including cooldown."""
        if isinstance(error, app_commands.CommandOnCooldown):
            if interaction.user.id == Config.OWNER_DISCORD_ID:
                # Owner bypasses the cooldown
                await self.tft_climb.callback(
                    self, interaction, interaction.namespace.riotid,
                    interaction.namespace.matches or Config.CLIMB_DEFAULT_MATCHES
                )
            else:
                await interaction.response.send_message(
                    embed=ErrorEmbeds.rate_limited(error.retry_after),
                    ephemeral=True
                )
        else:
            raise error


async def setup(bot):
    await bot.add_cog(ClimbCog(bot))

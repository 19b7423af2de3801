"""
Match browser command.

/tft shows a player's recent matches one board at a time with Previous/Next
buttons backed by a server-side session.
"""

import asyncio

import discord
from discord.ext import commands
from discord import app_commands

from tftbot.config import Config
from tftbot.services.match_history import MatchHistoryService
from tftbot.services.rate_limiter import rate_limit
from tftbot.ui.match_pagination import MatchNavigationButton, MatchPaginationView, build_frame_file
from tftbot.utils.embeds import build_match_embed
from tftbot.utils.error_embeds import ErrorEmbeds
from tftbot.utils.exceptions import ClimbBotError
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class TFTCog(commands.Cog):
    """Paginated match history."""

    def __init__(self, bot):
        self.bot = bot
        self.history_service = MatchHistoryService(
            bot.riot_client, bot.caches, bot.session_manager, bot.image_loader
        )

    async def cog_load(self):
        # Buttons from earlier sessions route here even without a live view
        self.bot.add_dynamic_items(MatchNavigationButton)

    async def cog_unload(self):
        self.bot.remove_dynamic_items(MatchNavigationButton)

    @app_commands.command(name="tft", description="Browse a player's recent TFT matches")
    @app_commands.describe(
        riotid="Riot ID in Name#TAG form (e.g., Doublelift#NA1)",
        matches=f"Number of matches to browse (1-{Config.TFT_MAX_MATCHES})"
    )
    @rate_limit("tft", limit=3, window=60)
    async def tft(self, interaction: discord.Interaction, riotid: str,
                  matches: app_commands.Range[int, 1, Config.TFT_MAX_MATCHES] = Config.TFT_DEFAULT_MATCHES):
        """Open a browse session on the player's newest match."""
        await interaction.response.defer()

        try:
            frame = await asyncio.wait_for(
                self.history_service.start(interaction.user.id, riotid, matches),
                timeout=Config.COMMAND_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(f"/tft for {riotid} timed out")
            await interaction.followup.send(embed=ErrorEmbeds.timed_out(), ephemeral=True)
            return
        except ClimbBotError as e:
            logger.info(f"/tft for {riotid} failed: {e}")
            await interaction.followup.send(embed=ErrorEmbeds.from_error(e), ephemeral=True)
            return
        except Exception as e:
            logger.error(f"Error in tft command for {riotid}: {e}", exc_info=True)
            await interaction.followup.send(
                embed=ErrorEmbeds.command_error("An error occurred while fetching match data."),
                ephemeral=True
            )
            return

        await interaction.followup.send(
            embed=build_match_embed(frame),
            file=build_frame_file(frame),
            view=MatchPaginationView(frame)
        )


async def setup(bot):
    await bot.add_cog(TFTCog(bot))

import asyncio
import logging
import traceback
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from tftbot.config import Config
from tftbot.rendering.images import ImageLoader
from tftbot.services.cache import TieredCacheManager
from tftbot.services.rate_limiter import SimpleRateLimiter
from tftbot.services.riot_client import RiotClient
from tftbot.services.session import SessionManager
from tftbot.utils.logger import setup_logger

class TFTClimbBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None,
            owner_id=Config.OWNER_DISCORD_ID or None
        )

        # Attach app command error handler
        self.tree.on_error = self.on_app_command_error

        self.caches = TieredCacheManager()
        self.session_manager = SessionManager(self.caches.sessions)
        self.rate_limiter = SimpleRateLimiter()
        self.riot_client: Optional[RiotClient] = None
        self.image_loader: Optional[ImageLoader] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up TFT Climb Bot...")

        self.riot_client = RiotClient()
        self.image_loader = ImageLoader(self.caches.images)

        # Load cogs
        await self.load_cogs()

        # Sync slash commands
        await self._sync_commands()

        self.logger.info("TFT Climb Bot setup complete!")

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'tftbot.cogs.tft',
            'tftbot.cogs.climb',
            'tftbot.cogs.stats',
            'tftbot.cogs.housekeeping',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Sync slash commands with Discord"""
        if not self.tree.get_commands():
            self.logger.warning("No application commands found to sync. Check for cog loading errors.")
            return

        try:
            guild_ids = Config.get_guild_ids()

            if guild_ids:
                # Guild-specific sync (instant updates)
                self.logger.info(f"Attempting to sync commands to {len(guild_ids)} guild(s): {guild_ids}...")

                total_synced = 0
                for guild_id in guild_ids:
                    try:
                        guild = discord.Object(id=guild_id)
                        self.tree.copy_global_to(guild=guild)
                        synced = await self.tree.sync(guild=guild)
                        self.logger.info(f"Successfully synced {len(synced)} command(s) to guild {guild_id}")
                        total_synced += len(synced)
                    except discord.errors.Forbidden:
                        self.logger.error(f"Permission error syncing to guild {guild_id}. Ensure the bot has the 'application.commands' scope and is in the guild.", exc_info=True)
                    except discord.errors.HTTPException as e:
                        self.logger.error(f"HTTP error syncing to guild {guild_id}. Status: {e.status}, Response: {e.text}", exc_info=True)

                self.logger.info(f"Multi-guild sync complete: {total_synced} total command instances deployed")
            else:
                # Global sync (can take up to 1 hour)
                self.logger.info("Attempting to sync commands globally... (Note: This can take up to an hour to propagate)")
                synced = await self.tree.sync()
                self.logger.info(f"Successfully synced {len(synced)} command(s) globally")
                for cmd in synced:
                    self.logger.info(f"  - {cmd.name}: {cmd.description}")
        except Exception as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)
            # Don't raise - bot should continue working with prefix commands

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

        await self.change_presence(
            activity=discord.Game(name="TFT | /tft-climb")
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'
        if isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Check failed for command '{command_name}' by user {interaction.user}")
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)

        if isinstance(error, app_commands.CommandOnCooldown):
            error_message = f"❌ Command is on cooldown. Try again in {error.retry_after:.2f} seconds."
        elif isinstance(error, app_commands.CheckFailure):
            if command_name.startswith('admin-'):
                error_message = "❌ Administrative Privileges Required\n\nThis command is restricted to the bot owner."
            else:
                error_message = "❌ Permission Denied\n\nYou don't have the required permissions to use this command."
        else:
            error_message = "❌ An unexpected error occurred while processing your command."

        try:
            error_embed = discord.Embed(
                title=error_message.split('\n')[0],
                description='\n'.join(error_message.split('\n')[1:]) if '\n' in error_message else None,
                color=discord.Color.red()
            )

            if interaction.response.is_done():
                await interaction.followup.send(embed=error_embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=error_embed, ephemeral=True)
        except Exception as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Global error handler for prefix commands"""
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.CheckFailure):
            self.logger.info(f"Permission denied for command '{ctx.command.name if ctx.command else 'Unknown'}' by user {ctx.author}")
            await ctx.send("❌ This command is restricted to the bot owner.")
            return

        self.logger.error(f"Unexpected error in command {ctx.command}: {error}")
        self.logger.error(''.join(traceback.format_exception(type(error), error, error.__traceback__)))

        embed = discord.Embed(
            title="❌ An error occurred",
            description="An unexpected error occurred while processing your command.",
            color=discord.Color.red()
        )
        await ctx.send(embed=embed)

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down TFT Climb Bot...")

        if self.riot_client:
            await self.riot_client.close()
        if self.image_loader:
            await self.image_loader.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = TFTClimbBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        await bot.close()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()

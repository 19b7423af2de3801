"""
Housekeeping Cog - Background Tasks & Admin Commands

Periodically sweeps expired entries out of every cache tier and the rate
limiter. Also provides owner commands for inspecting and sweeping the caches.
"""

import discord
from discord import app_commands
from discord.ext import commands, tasks
from datetime import datetime, timezone

from tftbot.config import Config
from tftbot.services.cache import TieredCacheManager
from tftbot.utils.error_embeds import ErrorEmbeds
from tftbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_cache_stats_embed(caches: TieredCacheManager) -> discord.Embed:
    embed = discord.Embed(
        title="🗄️ Cache Statistics",
        color=discord.Color.blue(),
        timestamp=datetime.now(timezone.utc)
    )
    for name, stats in caches.stats().items():
        embed.add_field(
            name=name,
            value=(
                f"Live: {stats['live']:.0f} / {stats['stored']:.0f}\n"
                f"Hits: {stats['hits']:.0f} | Misses: {stats['misses']:.0f}\n"
                f"TTL: {stats['ttl']:.0f}s"
            ),
            inline=True
        )
    return embed


class HousekeepingCog(commands.Cog):
    """Background cache maintenance"""

    def __init__(self, bot):
        self.bot = bot
        self.caches: TieredCacheManager = bot.caches
        self.logger = logger

    @commands.Cog.listener()
    async def on_ready(self):
        """Start background tasks after bot is ready"""
        if not self.sweep_caches.is_running():
            self.sweep_caches.start()
            self.logger.info("HousekeepingCog: Background tasks started")

    def cog_unload(self):
        """Stop background tasks when cog is unloaded"""
        self.sweep_caches.cancel()
        self.logger.info("HousekeepingCog: Background tasks stopped")

    @tasks.loop(seconds=Config.CACHE_SWEEP_INTERVAL)
    async def sweep_caches(self):
        """Background task removing expired cache entries and idle rate limit windows"""
        try:
            self.caches.sweep_all()
            pruned = self.bot.rate_limiter.prune()
            if pruned:
                self.logger.debug(f"Pruned {pruned} idle rate limit windows")
        except Exception as e:
            self.logger.error(f"Error in cache sweep task: {e}", exc_info=True)

    @sweep_caches.before_loop
    async def before_sweep_task(self):
        """Wait for bot to be ready before starting the sweep task"""
        await self.bot.wait_until_ready()

    @commands.command(name="sweepcache")
    @commands.is_owner()
    async def manual_sweep(self, ctx):
        """Manual command to sweep expired cache entries (owner only)"""
        removed = self.caches.sweep_all()
        total = sum(removed.values())
        details = ", ".join(f"{name}: {count}" for name, count in removed.items() if count)
        await ctx.send(f"✅ Swept {total} expired entries." + (f" ({details})" if details else ""))

    @commands.command(name="cachestats")
    @commands.is_owner()
    async def cache_stats(self, ctx):
        """Show per-tier cache statistics (owner only)"""
        await ctx.send(embed=build_cache_stats_embed(self.caches))

    @app_commands.command(
        name="admin-cache-stats",
        description="Show cache statistics (Owner only)"
    )
    async def admin_cache_stats(self, interaction: discord.Interaction):
        """Slash command showing per-tier cache statistics"""
        if interaction.user.id != Config.OWNER_DISCORD_ID:
            await interaction.response.send_message(embed=ErrorEmbeds.permission_denied(), ephemeral=True)
            return

        await interaction.response.send_message(embed=build_cache_stats_embed(self.caches), ephemeral=True)
        self.logger.info(f"Cache stats viewed by {interaction.user.id} ({interaction.user.name})")


async def setup(bot):
    await bot.add_cog(HousekeepingCog(bot))

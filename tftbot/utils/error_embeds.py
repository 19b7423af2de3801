"""
Centralized error embeds for consistent error handling across the TFT climb bot.
"""

import discord

from tftbot.utils.exceptions import ClimbBotError, UpstreamUnavailableError


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""

    @staticmethod
    def from_error(error: ClimbBotError) -> discord.Embed:
        """Create embed showing a bot error's user-facing message."""
        if isinstance(error, UpstreamUnavailableError):
            title = "Riot API Error"
        else:
            title = "Request Failed"
        return discord.Embed(
            title=title,
            description=error.user_message,
            color=discord.Color.red()
        )

    @staticmethod
    def command_error(error: str) -> discord.Embed:
        """Create embed for general command errors."""
        return discord.Embed(
            title="Command Error",
            description=f"An error occurred: {error}\n\nPlease try again or contact an administrator.",
            color=discord.Color.red()
        )

    @staticmethod
    def permission_denied() -> discord.Embed:
        """Create embed for permission errors."""
        return discord.Embed(
            title="Permission Denied",
            description="You don't have permission to perform this action.",
            color=discord.Color.red()
        )

    @staticmethod
    def rate_limited(retry_after: float = None) -> discord.Embed:
        """Create embed for cooldown errors."""
        description = "You're using commands too quickly. Please wait a moment and try again."
        if retry_after:
            description = f"You're using commands too quickly. Try again in {retry_after:.1f} seconds."
        return discord.Embed(
            title="Rate Limited",
            description=description,
            color=discord.Color.orange()
        )

    @staticmethod
    def timed_out() -> discord.Embed:
        """Create embed for requests that took too long."""
        return discord.Embed(
            title="Request Timed Out",
            description="The Riot API took too long to respond. Please try again in a moment.",
            color=discord.Color.orange()
        )

"""
Centralized error embeds for the Division tracker bot.

Provides standardized error messages so every command reports failures the
same way.
"""

import discord

from divbot.utils.exceptions import TrackerException


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""

    @staticmethod
    def tracker_error(error: TrackerException) -> discord.Embed:
        """Create embed for a pipeline failure, using its user-facing message."""
        return discord.Embed(
            title="Stats Unavailable",
            description=error.user_message,
            color=discord.Color.red()
        )

    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        """Create embed for invalid user input."""
        return discord.Embed(
            title="Invalid Input",
            description=message,
            color=discord.Color.red()
        )

    @staticmethod
    def timed_out() -> discord.Embed:
        """Create embed for commands that took too long."""
        return discord.Embed(
            title="Request Timed Out",
            description="⏰ Fetching stats is taking too long. Please try again in a moment.",
            color=discord.Color.orange()
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
    def rate_limited(retry_after: float) -> discord.Embed:
        """Create embed for rate limiting errors."""
        return discord.Embed(
            title="Rate Limited",
            description=f"⏰ Please wait {retry_after:.0f} seconds before looking up stats again.",
            color=discord.Color.orange()
        )

"""
Division stats commands.

``!div <1|2> <name>`` (also ``!div1 <name>`` / ``!div2 <name>``) and the
``/div`` slash command look up a player's stats in The Division or The
Division 2 and reply with one embed per matching profile.
"""

import asyncio
from typing import List, Optional

import discord
from discord import app_commands
from discord.ext import commands

from divbot.config import Config
from divbot.constants import Games, UIConstants
from divbot.utils.embeds import build_stats_embed
from divbot.utils.error_embeds import ErrorEmbeds
from divbot.utils.exceptions import TrackerException
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)

USAGE = f"Usage: `{Config.COMMAND_PREFIX}div <1|2> <player name>`"


def embed_batches(embeds: List[discord.Embed]) -> List[List[discord.Embed]]:
    """Split embeds into groups that fit in one message each."""
    size = UIConstants.MAX_EMBEDS_PER_MESSAGE
    return [embeds[i:i + size] for i in range(0, len(embeds), size)]


class TrackerCog(commands.Cog):
    """Player stats lookups for The Division games."""

    def __init__(self, bot):
        self.bot = bot
        self.stats_service = bot.stats_service

    async def lookup(self, game: int, name: str) -> List[discord.Embed]:
        """Run the stats pipeline and turn the outcome into embeds."""
        try:
            records = await asyncio.wait_for(
                self.stats_service.get_stats(game, name),
                timeout=Config.COMMAND_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(f"Stats lookup for '{name}' (game {game}) timed out")
            return [ErrorEmbeds.timed_out()]
        except TrackerException as e:
            logger.info(f"Stats lookup for '{name}' (game {game}) failed: {e}")
            return [ErrorEmbeds.tracker_error(e)]
        except Exception as e:
            logger.error(f"Error in stats lookup for '{name}' (game {game}): {e}", exc_info=True)
            return [ErrorEmbeds.command_error("An error occurred while fetching stats. Please try again later.")]

        return [build_stats_embed(record) for record in records]

    @staticmethod
    def parse_game(game: str) -> Optional[int]:
        try:
            selector = int(game)
        except (TypeError, ValueError):
            return None
        return selector if selector in Games.NAMES else None

    @app_commands.command(name="div", description="Look up a player's stats in The Division games")
    @app_commands.describe(game="Which game to look up", name="Ubisoft Connect display name")
    @app_commands.choices(game=[
        app_commands.Choice(name=Games.NAMES[Games.DIVISION_1], value=Games.DIVISION_1),
        app_commands.Choice(name=Games.NAMES[Games.DIVISION_2], value=Games.DIVISION_2),
    ])
    @app_commands.checks.cooldown(rate=1, per=15.0, key=lambda i: i.user.id)
    async def div_slash(self, interaction: discord.Interaction, game: app_commands.Choice[int], name: str):
        """Display a player's stats for the selected game."""
        # Defer immediately, browser lookups can take a while
        await interaction.response.defer()
        embeds = await self.lookup(game.value, name)
        for batch in embed_batches(embeds):
            await interaction.followup.send(embeds=batch)

    @commands.command(name='div')
    @commands.cooldown(rate=1, per=15.0, type=commands.BucketType.user)
    async def div(self, ctx, game: Optional[str] = None, *, name: Optional[str] = None):
        """Look up a player's stats: !div <1|2> <name>"""
        selector = self.parse_game(game)
        if selector is None or not name:
            await ctx.send(embed=ErrorEmbeds.invalid_input(USAGE))
            return
        await self._reply(ctx, selector, name)

    @commands.command(name='div1')
    @commands.cooldown(rate=1, per=15.0, type=commands.BucketType.user)
    async def div1(self, ctx, *, name: Optional[str] = None):
        """Look up a player's stats in The Division: !div1 <name>"""
        if not name:
            await ctx.send(embed=ErrorEmbeds.invalid_input(USAGE))
            return
        await self._reply(ctx, Games.DIVISION_1, name)

    @commands.command(name='div2')
    @commands.cooldown(rate=1, per=15.0, type=commands.BucketType.user)
    async def div2(self, ctx, *, name: Optional[str] = None):
        """Look up a player's stats in The Division 2: !div2 <name>"""
        if not name:
            await ctx.send(embed=ErrorEmbeds.invalid_input(USAGE))
            return
        await self._reply(ctx, Games.DIVISION_2, name)

    async def _reply(self, ctx, game: int, name: str):
        async with ctx.typing():
            embeds = await self.lookup(game, name)
        for batch in embed_batches(embeds):
            await ctx.send(embeds=batch)


async def setup(bot):
    await bot.add_cog(TrackerCog(bot))

import asyncio
import logging
import traceback
from datetime import timedelta
from typing import Optional

import aiohttp
import discord
from discord.ext import commands
from discord import app_commands

from divbot.config import Config
from divbot.database.database import Database
from divbot.services.browser import PlaywrightTextFetcher
from divbot.services.name_cache import NameCacheService
from divbot.services.profile_resolver import ProfileResolver
from divbot.services.session_manager import SessionManager, TicketStore
from divbot.services.stats_fetcher import StatsFetcher
from divbot.services.stats_service import StatsService
from divbot.services.stats_sources import TrackerPageSource, UbiStatsCardSource
from divbot.services.ubi_client import UbiClient
from divbot.utils.error_embeds import ErrorEmbeds
from divbot.utils.logger import setup_logger

class DivTrackerBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents
        )

        # Attach app command error handler
        self.tree.on_error = self.on_app_command_error

        self.db: Optional[Database] = None
        self.http_session: Optional[aiohttp.ClientSession] = None
        self.stats_service: Optional[StatsService] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Division Tracker Bot...")

        # Initialize database
        self.db = Database()
        await self.db.initialize()

        self.http_session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=Config.HTTP_TIMEOUT)
        )
        self.stats_service = self.build_stats_service()
        self.logger.info("Stats pipeline initialized")

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Division Tracker Bot setup complete!")

    def build_stats_service(self) -> StatsService:
        """Wire the session manager, resolver, fetcher and both game sources"""
        ubi_client = UbiClient(self.http_session, Config.UBI_USERNAME, Config.UBI_PASSWORD)
        session_manager = SessionManager(
            TicketStore(),
            ubi_client.login,
            margin=timedelta(minutes=Config.TICKET_RENEWAL_MARGIN_MINUTES),
            max_attempts=Config.MAX_LOGIN_ATTEMPTS
        )
        name_cache = NameCacheService(self.db.session_factory)
        resolver = ProfileResolver(ubi_client, session_manager, name_cache)
        fetcher = StatsFetcher(
            resolver,
            name_cache,
            concurrency=Config.FETCH_CONCURRENCY,
            task_timeout=Config.FETCH_TIMEOUT
        )
        text_fetcher = PlaywrightTextFetcher(
            cdp_url=Config.BROWSER_CDP_URL,
            headless=Config.BROWSER_HEADLESS,
            timeout=int(Config.BROWSER_TIMEOUT * 1000)
        )
        sources = [
            UbiStatsCardSource(ubi_client, session_manager),
            TrackerPageSource(text_fetcher),
        ]
        return StatsService(fetcher, name_cache, sources)

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'divbot.cogs.tracker',
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
                self.logger.info(f"Attempting to sync commands to {len(guild_ids)} guild(s): {guild_ids}...")
                for guild_id in guild_ids:
                    try:
                        guild = discord.Object(id=guild_id)
                        self.tree.copy_global_to(guild=guild)
                        synced = await self.tree.sync(guild=guild)
                        self.logger.info(f"Successfully synced {len(synced)} command(s) to guild {guild_id}")
                    except discord.errors.HTTPException as e:
                        self.logger.error(f"HTTP error syncing to guild {guild_id}. Status: {e.status}, Response: {e.text}", exc_info=True)
            else:
                # Global sync (can take up to 1 hour, works everywhere)
                self.logger.info("Attempting to sync commands globally...")
                synced = await self.tree.sync()
                self.logger.info(f"Successfully synced {len(synced)} command(s) globally")
        except Exception as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)
            # Don't raise - prefix commands keep working

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

        await self.change_presence(
            activity=discord.Game(name=f"The Division | {Config.COMMAND_PREFIX}div or /div")
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'

        if isinstance(error, app_commands.CommandOnCooldown):
            embed = ErrorEmbeds.rate_limited(error.retry_after)
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)
            embed = ErrorEmbeds.command_error("An unexpected error occurred while processing your command.")

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except Exception as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Global error handler for commands"""
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.CommandOnCooldown):
            await ctx.send(embed=ErrorEmbeds.rate_limited(error.retry_after))
            return

        if isinstance(error, commands.UserInputError):
            await ctx.send(embed=ErrorEmbeds.invalid_input(str(error)))
            return

        self.logger.error(f"Unexpected error in command {ctx.command}: {error}", exc_info=error)
        await ctx.send(embed=ErrorEmbeds.command_error("An unexpected error occurred while processing your command."))

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Division Tracker Bot...")

        if self.http_session and not self.http_session.closed:
            await self.http_session.close()

        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = DivTrackerBot()

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

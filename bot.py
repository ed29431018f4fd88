"""
Nexus Store - Discord bot for order verification and ticketing.

This is the main entrypoint for the bot.
"""

import asyncio
import re
import sys
from pathlib import Path

import discord
from discord.ext import commands
from dotenv import load_dotenv

from nexus_core import Database, StoreGateway, load_config
from nexus_core.health import start_health_server
from nexus_core.logger import setup_logger

# Load environment variables from .env file
load_dotenv()

logger = setup_logger()

COGS_DIR = Path(__file__).resolve().parent / "cogs"


def _validate_token_format(token: str) -> bool:
    """
    Validates that the token matches the expected Discord token format.

    Expected format: three base64-like segments separated by dots.
    """
    if not token or not isinstance(token, str):
        return False

    parts = token.split('.')
    if len(parts) != 3:
        return False

    token_part_pattern = r'^[A-Za-z0-9_-]+$'
    if not all(re.match(token_part_pattern, part) for part in parts):
        return False

    if len(parts[0]) < 10 or len(parts[1]) < 3 or len(parts[2]) < 10:
        return False

    return True


class NexusBot(commands.Bot):
    """Bot holding the store session, data layer and configuration."""

    def __init__(self, *args, **kwargs):
        self.config = kwargs.pop("config")
        self.store = StoreGateway(self.config.store.url, self.config.store.service_key)
        self.db = Database(self.store)
        self.health_runner = None
        super().__init__(*args, **kwargs)

    async def setup_hook(self):
        await self.store.connect()
        logger.info("Store session ready.")

        if self.config.channel_ids.error_log:
            setup_logger(
                level=self.config.log_level,
                enable_discord=True,
                bot=self,
                error_channel_id=self.config.channel_ids.error_log,
            )
            logger.info("Discord error-channel logging enabled.")

        self.health_runner = await start_health_server(self.config.health_port)

        await self._load_cogs()

    async def _load_cogs(self):
        if not COGS_DIR.exists():
            logger.warning("No cogs directory found. Skipping cog loading.")
            return

        for cog_file in sorted(COGS_DIR.glob("*.py")):
            if cog_file.stem.startswith("_"):
                continue

            extension = f"cogs.{cog_file.stem}"
            try:
                await self.load_extension(extension)
                logger.info(f"Loaded extension: {extension}")
            except Exception as e:
                logger.error(f"Failed to load extension {extension}: {e}", exc_info=True)

    async def on_ready(self):
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info("Nexus Store bot is ready!")

    async def close(self):
        if self.health_runner is not None:
            await self.health_runner.cleanup()
            self.health_runner = None

        await super().close()

        await self.store.close()
        logger.info("Store session closed.")


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True
    intents.members = True
    intents.guilds = True
    intents.dm_messages = True
    return intents


async def main():
    try:
        config = load_config()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    setup_logger(level=config.log_level)

    if not _validate_token_format(config.token):
        logger.error("Invalid DISCORD_TOKEN format in environment variables.")
        sys.exit(1)

    bot = NexusBot(
        command_prefix=config.bot_prefix,
        intents=build_intents(),
        case_insensitive=True,
        help_command=None,
        config=config,
    )

    async with bot:
        try:
            await bot.start(config.token)
        except discord.LoginFailure as e:
            logger.error("Bot failed to login: %s", e)
            sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot shut down by user.")

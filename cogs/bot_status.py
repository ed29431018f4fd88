"""
Presence reporter.

Rotates the bot's displayed activity every 30 seconds, including the
current count of verified orders.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import discord
from discord.ext import commands, tasks

from nexus_core.constants import PRESENCE_INTERVAL_SECONDS
from nexus_core.logger import get_logger
from nexus_core.models import OrderStatus

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()


def presence_options(verified_count: int) -> list[discord.Activity]:
    return [
        discord.Activity(type=discord.ActivityType.watching, name="NexusStore"),
        discord.Activity(type=discord.ActivityType.watching, name=f"{verified_count} Verified Orders"),
        discord.Activity(type=discord.ActivityType.playing, name="New Products"),
        discord.Activity(type=discord.ActivityType.listening, name="!help | DM for Support"),
    ]


class BotStatusCog(commands.Cog):
    """Periodic presence updates."""

    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        self.presence_task.start()
        logger.info("Presence reporter started")

    def cog_unload(self) -> None:
        self.presence_task.cancel()

    async def update_presence(self) -> None:
        """Pick a random activity; leaves the presence untouched on failure."""
        try:
            verified = await self.bot.db.count_orders(OrderStatus.VERIFIED)
            activity = random.choice(presence_options(verified))
            await self.bot.change_presence(status=discord.Status.online, activity=activity)
        except Exception as e:
            logger.error(f"Error updating presence: {e}")

    @tasks.loop(seconds=PRESENCE_INTERVAL_SECONDS)
    async def presence_task(self) -> None:
        await self.update_presence()

    @presence_task.before_loop
    async def before_presence_task(self) -> None:
        """Wait until the bot is ready before starting the task."""
        await self.bot.wait_until_ready()


async def setup(bot: NexusBot) -> None:
    """Load the Bot Status cog."""
    await bot.add_cog(BotStatusCog(bot))

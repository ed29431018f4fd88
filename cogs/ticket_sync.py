"""Mirror every ticket channel message into the ticket_messages table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from nexus_core.logger import get_logger
from nexus_core.utils import TicketMetadataError, is_ticket_channel, parse_ticket_topic

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

EMBED_PLACEHOLDER = "[Widżet Embed]"
ATTACHMENT_PLACEHOLDER = "[Załącznik]"


def message_log_content(message: discord.Message) -> str:
    if message.content:
        return message.content
    return EMBED_PLACEHOLDER if message.embeds else ATTACHMENT_PLACEHOLDER


class TicketSyncCog(commands.Cog):
    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.guild is None or not is_ticket_channel(message.channel):
            return

        try:
            meta = parse_ticket_topic(getattr(message.channel, "topic", None), require_ticket=True)
        except TicketMetadataError:
            return

        member = message.author if isinstance(message.author, discord.Member) else None
        try:
            await self.bot.db.log_ticket_message(
                meta.ticket_id,
                author_name=member.display_name if member else message.author.name,
                author_tag=str(message.author),
                content=message_log_content(message),
                is_bot=message.author.bot,
            )
        except Exception as e:
            logger.error("Error syncing message %s for ticket %s: %s", message.id, meta.ticket_id, e, exc_info=True)


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(TicketSyncCog(bot))

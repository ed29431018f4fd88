"""Announcement system: post tracked announcements and remove them by id."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from nexus_core.constants import COLOR_INFO
from nexus_core.logger import get_logger
from nexus_core.utils import create_embed, get_error_message
from nexus_core.utils.permissions import is_admin

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

DELETE_KEYWORD = "usun"
# "<content> <id>": the id is the last whitespace-free token, content may span lines.
CREATE_PATTERN = re.compile(r"^(?P<content>.+)\s+(?P<announcement_id>\S+)$", re.DOTALL)


def parse_create_arguments(raw: str) -> Optional[tuple[str, str]]:
    match = CREATE_PATTERN.match(raw.strip())
    if not match:
        return None
    return match["content"], match["announcement_id"]


def build_announcement_embed(content: str) -> discord.Embed:
    return create_embed(
        title="📢 ANNOUNCEMENT",
        description=content,
        color=COLOR_INFO,
        footer="NexusStore Announcements",
        timestamp=True,
    )


class AnnouncementsCog(commands.Cog):
    """Commands for sending announcements."""

    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    def _announcement_channel(self) -> Optional[discord.abc.Messageable]:
        channel_id = self.bot.config.channel_ids.announcements
        if not channel_id:
            return None
        return self.bot.get_channel(channel_id)

    @commands.command(name="ogloszenie")
    async def announcement(self, ctx: commands.Context, *, raw: str = "") -> None:
        """Post an announcement, or remove one with ``usun <id>``."""
        if not is_admin(ctx.author, self.bot.config.admin):
            await ctx.reply(get_error_message("no_permission"))
            return

        parts = raw.split()
        if parts and parts[0] == DELETE_KEYWORD:
            await self.delete_announcement(ctx, parts[1] if len(parts) > 1 else None)
            return

        parsed = parse_create_arguments(raw)
        if parsed is None:
            await ctx.reply(get_error_message("announcement_usage"))
            return

        content, announcement_id = parsed
        await self.create_announcement(ctx, content, announcement_id)

    async def create_announcement(self, ctx: commands.Context, content: str, announcement_id: str) -> None:
        try:
            channel = self._announcement_channel()
            if channel is None:
                await ctx.reply(get_error_message("announcement_channel_missing"))
                return

            sent = await channel.send(embed=build_announcement_embed(content))
            await self.bot.db.save_announcement(announcement_id, sent.id)

            logger.info("Announcement %s posted by %s (message %s)", announcement_id, ctx.author, sent.id)
            await ctx.reply(f"✅ Ogłoszenie zostało wysłane i zapisane pod ID: `{announcement_id}`")
        except Exception as e:
            logger.error("Failed to post announcement %s: %s", announcement_id, e, exc_info=True)
            await ctx.reply(get_error_message("announcement_send_failed"))

    async def delete_announcement(self, ctx: commands.Context, announcement_id: Optional[str]) -> None:
        if not announcement_id:
            await ctx.reply(get_error_message("announcement_delete_usage"))
            return

        try:
            announcement = await self.bot.db.get_announcement(announcement_id)
            if announcement is None:
                await ctx.reply(get_error_message("announcement_not_found", announcement_id=announcement_id))
                return

            channel = self._announcement_channel()
            if channel is not None:
                try:
                    message = await channel.fetch_message(int(announcement.discord_message_id))
                    await message.delete()
                except (discord.HTTPException, ValueError) as e:
                    logger.warning(
                        "Could not delete message %s of announcement %s: %s",
                        announcement.discord_message_id,
                        announcement_id,
                        e,
                    )

            await self.bot.db.delete_announcement(announcement_id)
            logger.info("Announcement %s deleted by %s", announcement_id, ctx.author)
            await ctx.reply(f"✅ Ogłoszenie `{announcement_id}` zostało usunięte.")
        except Exception as e:
            logger.error("Failed to delete announcement %s: %s", announcement_id, e, exc_info=True)
            await ctx.reply(get_error_message("announcement_delete_failed"))


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(AnnouncementsCog(bot))

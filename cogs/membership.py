"""Entry and exit notifications for guild members."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from nexus_core.constants import COLOR_DANGER, COLOR_SUCCESS
from nexus_core.logger import get_logger
from nexus_core.utils import create_embed

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

GATEWAY_FOOTER = "NexusStore Gateway"


def build_welcome_embed(member: discord.Member) -> discord.Embed:
    embed = create_embed(
        title="👋 WELCOME TO THE NEXUS!",
        description=(
            f"Hello {member.mention}! We are glad to have you here.\n\n"
            "Enjoy your stay and check out our products!"
        ),
        color=COLOR_SUCCESS,
        footer=GATEWAY_FOOTER,
        timestamp=True,
    )
    embed.set_thumbnail(url=member.display_avatar.url)
    embed.add_field(name="👤 Username", value=f"`{member}`", inline=True)
    embed.add_field(name="📊 Member Count", value=f"`{member.guild.member_count}`", inline=True)
    return embed


def build_goodbye_embed(member: discord.Member) -> discord.Embed:
    embed = create_embed(
        title="👋 THANK YOU FOR VISITING!",
        description=f"Goodbye {member}! We hope to see you again soon.\n\nTake care!",
        color=COLOR_DANGER,
        footer=GATEWAY_FOOTER,
        timestamp=True,
    )
    embed.set_thumbnail(url=member.display_avatar.url)
    return embed


class MembershipCog(commands.Cog):
    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    def _gateway_channel(self, member: discord.Member, channel_id: Optional[int], label: str):
        if not channel_id:
            return None
        channel = member.guild.get_channel(channel_id)
        if channel is None:
            logger.warning("%s channel %s not found. Check %s_CHANNEL_ID in .env", label.title(), channel_id, label.upper())
        return channel

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        channel = self._gateway_channel(member, self.bot.config.channel_ids.entry, "entry")
        if channel is None:
            return
        try:
            await channel.send(embed=build_welcome_embed(member))
        except Exception as e:
            logger.error("Error in on_member_join for %s: %s", member.id, e, exc_info=True)

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member) -> None:
        channel = self._gateway_channel(member, self.bot.config.channel_ids.exit, "exit")
        if channel is None:
            return
        try:
            await channel.send(embed=build_goodbye_embed(member))
        except Exception as e:
            logger.error("Error in on_member_remove for %s: %s", member.id, e, exc_info=True)


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(MembershipCog(bot))

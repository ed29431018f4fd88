"""Posts the static rules and links panels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import discord
from discord.ext import commands

from nexus_core.constants import COLOR_INFO, COLOR_RULES
from nexus_core.logger import get_logger
from nexus_core.utils import create_embed, get_error_message
from nexus_core.utils.permissions import is_admin

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

RULES = (
    ("1️⃣ Respect", "Be respectful to all members and staff. Hate speech is strictly prohibited."),
    ("2️⃣ No Spam", "Do not spam messages, emojis, or links."),
    ("3️⃣ Legit Products", "All transactions should be handled via established channels. No scamming."),
    ("4️⃣ Support", "Use the ticket system for any purchase issues."),
)


def build_rules_embed() -> discord.Embed:
    embed = create_embed(
        title="📜 NEXUS STORE RULES",
        description="By staying on this server, you agree to the following rules:",
        color=COLOR_RULES,
        footer="NexusStore Official Rules",
        timestamp=True,
    )
    for name, value in RULES:
        embed.add_field(name=name, value=value, inline=False)
    return embed


def build_links_embed(shop_url: str, thumbnail_url: Optional[str] = None) -> discord.Embed:
    embed = create_embed(
        title="🔗 OFFICIAL LINKS",
        description="Check out our official store and social media!",
        color=COLOR_INFO,
    )
    host = shop_url.split("://", 1)[-1].rstrip("/")
    embed.add_field(name="🛒 Website", value=f"[{host}]({shop_url})", inline=True)
    if thumbnail_url:
        embed.set_thumbnail(url=thumbnail_url)
    return embed


class SetupCog(commands.Cog):
    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    def _panels(self) -> dict[str, tuple[Optional[int], str, Callable[[], discord.Embed], str]]:
        channel_ids = self.bot.config.channel_ids
        return {
            "rules": (channel_ids.rules, "RULES_CHANNEL_ID", build_rules_embed, "✅ Rules posted!"),
            "links": (channel_ids.links, "LINKS_CHANNEL_ID", self._links_embed, "✅ Links posted!"),
        }

    def _links_embed(self) -> discord.Embed:
        avatar = self.bot.user.display_avatar.url if self.bot.user else None
        return build_links_embed(self.bot.config.shop_url, avatar)

    @commands.command(name="setup")
    async def setup_panel(self, ctx: commands.Context, panel: str = "") -> None:
        """Post the rules or links panel to its configured channel."""
        if not is_admin(ctx.author, self.bot.config.admin):
            await ctx.reply(get_error_message("admin_only"))
            return

        panels = self._panels()
        if panel not in panels:
            await ctx.reply(get_error_message("setup_usage"))
            return

        channel_id, variable, build, confirmation = panels[panel]
        channel = self.bot.get_channel(channel_id) if channel_id else None
        if channel is None:
            await ctx.reply(get_error_message("setup_channel_missing", variable=variable))
            return

        try:
            await channel.send(embed=build())
        except discord.HTTPException as e:
            logger.error("Failed to post %s panel to %s: %s", panel, channel_id, e, exc_info=True)
            return

        logger.info("Posted %s panel to %s", panel, channel_id)
        await ctx.reply(confirmation)


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(SetupCog(bot))

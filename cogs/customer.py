"""Customer contact from a ticket: transcript backup and summons."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from nexus_core.logger import get_logger
from nexus_core.transcripts import fetch_transcript_messages, render_transcript, transcript_file
from nexus_core.utils import TicketChannelMeta, TicketMetadataError, get_error_message, parse_ticket_topic
from nexus_core.utils.permissions import require_ticket_admin

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()


class CustomerContactCog(commands.Cog):
    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    async def _ticket_customer(self, ctx: commands.Context) -> Optional[TicketChannelMeta]:
        try:
            return parse_ticket_topic(ctx.channel.topic)
        except TicketMetadataError as e:
            logger.warning("No customer id in #%s: %s", ctx.channel.name, e)
            await ctx.reply(get_error_message("customer_not_found"))
            return None

    @commands.command(name="backup")
    async def backup(self, ctx: commands.Context) -> None:
        """Send a text transcript of this ticket to the customer."""
        if not await require_ticket_admin(ctx, self.bot.config.admin):
            return

        meta = await self._ticket_customer(ctx)
        if meta is None:
            return

        channel_name = ctx.channel.name
        try:
            await ctx.send("⏳ Generowanie backupu rozmowy...")
            messages = await fetch_transcript_messages(ctx.channel)
            transcript = render_transcript(channel_name, messages)
        except Exception as e:
            logger.error("Failed to build transcript for #%s: %s", channel_name, e, exc_info=True)
            await ctx.reply(get_error_message("backup_failed"))
            return

        try:
            customer = await self.bot.fetch_user(meta.customer_id)
            await customer.send(
                content=(
                    f"📦 **Witaj!** Przesyłamy kopię Twojej rozmowy z kanału **{channel_name}**. "
                    "Dziękujemy za zaufanie!"
                ),
                file=transcript_file(channel_name, transcript),
            )
            await ctx.send("✅ Backup został wysłany do klienta na DM!")
            logger.info("Transcript of #%s sent to %s", channel_name, meta.customer_id)
            return
        except discord.HTTPException as e:
            logger.warning("Could not DM transcript of #%s to %s: %s", channel_name, meta.customer_id, e)

        try:
            await ctx.send(
                "❌ Nie udało się wysłać backupu do klienta (zablokowane DM). Wysyłam tutaj:",
                file=transcript_file(channel_name, transcript),
            )
        except discord.HTTPException as e:
            logger.error("Failed to post transcript in #%s: %s", channel_name, e, exc_info=True)
            await ctx.reply(get_error_message("backup_failed"))

    @commands.command(name="wezwij")
    async def summon(self, ctx: commands.Context) -> None:
        """DM the customer that an administrator is waiting in the ticket."""
        if not await require_ticket_admin(ctx, self.bot.config.admin):
            return

        meta = await self._ticket_customer(ctx)
        if meta is None:
            return

        admin_name = getattr(ctx.author, "display_name", None) or ctx.author.name
        try:
            customer = await self.bot.fetch_user(meta.customer_id)
            await customer.send(
                f"🔔 **{admin_name}** użył !wezwij - **Staw się na ticketa!**\n\n"
                "Administrator potrzebuje Twojej uwagi na kanale zamówienia."
            )
        except discord.HTTPException as e:
            logger.warning("Could not DM summons to %s: %s", meta.customer_id, e)
            await ctx.send("❌ Nie udało się wysłać wiadomości do klienta (zablokowane DM).")
            return
        except Exception as e:
            logger.error("Summons to %s failed: %s", meta.customer_id, e, exc_info=True)
            await ctx.reply(get_error_message("summon_failed"))
            return

        await ctx.send("✅ Wysłano wezwanie do klienta!")


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(CustomerContactCog(bot))

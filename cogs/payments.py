"""BLIK payment instructions posted into an order ticket."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Optional

import discord
from discord.ext import commands

from nexus_core.constants import COLOR_PAYMENT, PAYMENT_LOOKBACK_MESSAGES, TICKET_SUMMARY_TITLE
from nexus_core.logger import get_logger
from nexus_core.ticket_ui import FIELD_AMOUNT, FIELD_ORDER_ID
from nexus_core.utils import create_embed, get_error_message, order_id_from_channel
from nexus_core.utils.permissions import require_ticket_admin

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

BLIK_LOGO_URL = (
    "https://upload.wikimedia.org/wikipedia/commons/thumb/c/c5/Blik_logo.svg/1200px-Blik_logo.svg.png"
)


@dataclass(frozen=True)
class PaymentDetails:
    order_id: str
    total: str
    currency: str


def details_from_summary(embed: Any) -> Optional[PaymentDetails]:
    """Read the amount and order id back out of a ticket summary embed."""
    fields = {field.name: field.value for field in embed.fields}
    amount = fields.get(FIELD_AMOUNT)
    order_id = fields.get(FIELD_ORDER_ID)
    if not amount or not order_id:
        return None

    total, _, currency = amount.replace("*", "").strip().partition(" ")
    return PaymentDetails(order_id=order_id.replace("`", "").strip(), total=total, currency=currency.strip())


def find_summary_details(messages: Iterable[Any], bot_user_id: int) -> Optional[PaymentDetails]:
    for message in messages:
        if message.author.id != bot_user_id or not message.embeds:
            continue
        if message.embeds[0].title != TICKET_SUMMARY_TITLE:
            continue
        details = details_from_summary(message.embeds[0])
        if details is not None:
            return details
    return None


def build_payment_embed(details: PaymentDetails, phone_number: str) -> discord.Embed:
    embed = create_embed(
        title="💳 Instrukcja Płatności BLIK",
        description=(
            "Prosimy o dokonanie przelewu na telefon BLIK zgodnie z poniższymi danymi. "
            "Po wykonaniu płatności wyślij potwierdzenie na tym kanale."
        ),
        color=COLOR_PAYMENT,
        footer="NexusStore Payment System",
        timestamp=True,
    )
    embed.set_thumbnail(url=BLIK_LOGO_URL)
    embed.add_field(name="📱 Numer Telefonu (BLIK)", value=f"`{phone_number}`", inline=False)
    embed.add_field(name="💰 Kwota do zapłaty", value=f"**{details.total} {details.currency}**", inline=True)
    embed.add_field(name="🆔 Tytuł Przelewu", value=f"`Order {details.order_id}`", inline=True)
    embed.add_field(
        name="⚠️ Ważne",
        value=(
            "Upewnij się, że przesyłasz dokładną kwotę. "
            "Zamówienie zostanie zrealizowane natychmiast po zaksięgowaniu wpłaty."
        ),
        inline=False,
    )
    return embed


class PaymentsCog(commands.Cog):
    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    async def _resolve_details(self, ctx: commands.Context) -> Optional[PaymentDetails]:
        messages = [message async for message in ctx.channel.history(limit=PAYMENT_LOOKBACK_MESSAGES)]
        details = find_summary_details(messages, self.bot.user.id)
        if details is not None:
            logger.debug("Payment details for #%s read from summary embed", ctx.channel.name)
            return details

        order = await self.bot.db.find_order_by_order_id(order_id_from_channel(ctx.channel))
        if order is None:
            return None
        return PaymentDetails(order_id=order.order_id, total=str(order.total), currency=order.currency)

    @commands.command(name="platnosc")
    async def payment(self, ctx: commands.Context) -> None:
        """Post BLIK payment instructions for this ticket's order."""
        if not await require_ticket_admin(ctx, self.bot.config.admin):
            return

        phone_number = self.bot.config.payment.blik_phone_number
        if not phone_number:
            await ctx.reply(get_error_message("payment_not_configured"))
            return

        try:
            details = await self._resolve_details(ctx)
            if details is None:
                await ctx.reply(get_error_message("payment_data_missing"))
                return

            try:
                await ctx.message.delete()
            except discord.HTTPException:
                pass

            await ctx.send(embed=build_payment_embed(details, phone_number))
            logger.info("Payment instructions posted for order %s", details.order_id)
        except Exception as e:
            logger.error("Failed to post payment instructions in #%s: %s", ctx.channel.name, e, exc_info=True)
            await ctx.reply(get_error_message("payment_failed"))


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(PaymentsCog(bot))

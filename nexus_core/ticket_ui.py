"""Ticket summary embed and the claim/reject buttons attached to it."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

import discord

from .config import AdminPolicy
from .constants import (
    COLOR_DANGER,
    COLOR_INFO,
    COLOR_SUCCESS,
    TICKET_FOOTER,
    TICKET_SUMMARY_TITLE,
)
from .logger import get_logger
from .models import Order
from .utils.embeds import create_embed

logger = get_logger()

FIELD_CODE = "Kod Nexus"
FIELD_ORDER_ID = "ID Zamówienia"
FIELD_CUSTOMER = "Klient"
FIELD_EMAIL = "Email"
FIELD_AMOUNT = "Kwota"
FIELD_PRODUCTS = "Produkty"
FIELD_STATUS = "🔒 Status"

ACTION_CLAIM = "claim"
ACTION_REJECT = "reject"

LIFECYCLE_COG_NAME = "TicketLifecycleCog"


def admin_mention(policy: AdminPolicy) -> str:
    return f"<@&{policy.role_id}>" if policy.enforced else "@admin"


def build_summary_embed(order: Order, requester: Any) -> discord.Embed:
    embed = create_embed(
        title=TICKET_SUMMARY_TITLE,
        description=f"Witaj {requester.mention}! Oczekiwanie na weryfikację przez administratora.",
        color=COLOR_INFO,
        footer=TICKET_FOOTER,
        timestamp=True,
    )
    embed.add_field(name=FIELD_CODE, value=f"`{order.nexus_code}`", inline=True)
    embed.add_field(name=FIELD_ORDER_ID, value=f"`{order.order_id}`", inline=True)
    embed.add_field(name=FIELD_CUSTOMER, value=f"{requester.mention} ({requester})", inline=False)
    embed.add_field(name=FIELD_EMAIL, value=order.email or "—", inline=True)
    embed.add_field(name=FIELD_AMOUNT, value=f"**{order.total} {order.currency}**", inline=True)
    embed.add_field(name=FIELD_PRODUCTS, value=order.render_items() or "—", inline=False)
    return embed


def claimed_embed(original: Optional[discord.Embed], admin: Any, *, now: Optional[datetime] = None) -> discord.Embed:
    embed = original.copy() if original else create_embed(title=TICKET_SUMMARY_TITLE)
    embed.color = discord.Color(COLOR_SUCCESS)
    embed.add_field(name=FIELD_STATUS, value=f"Zgłoszenie przyjęte przez: {admin.mention}", inline=False)
    accepted_at = (now or datetime.now().astimezone()).strftime("%H:%M:%S")
    embed.set_footer(text=f"Zaakceptowano: {accepted_at}")
    return embed


def rejected_embed(original: Optional[discord.Embed], admin: Any) -> discord.Embed:
    embed = original.copy() if original else create_embed(title=TICKET_SUMMARY_TITLE)
    embed.color = discord.Color(COLOR_DANGER)
    embed.description = f"**Status: ODRZUCONE**\nPrzez: {admin.mention}"
    return embed


class OrderActionButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=r"(?P<action>claim|reject)_(?P<order_pk>.+)",
):
    """Claim / reject button whose custom id carries the order's internal id.

    Registered with ``bot.add_dynamic_items`` so buttons keep working for
    summaries posted before a restart.
    """

    def __init__(self, action: str, order_pk: Any) -> None:
        if action == ACTION_CLAIM:
            label, style = "🙋‍♂️ Przejmij (Akceptuj)", discord.ButtonStyle.success
        else:
            label, style = "⛔ Odrzuć", discord.ButtonStyle.danger
        super().__init__(discord.ui.Button(label=label, style=style, custom_id=f"{action}_{order_pk}"))
        self.action = action
        self.order_pk = str(order_pk)

    @classmethod
    async def from_custom_id(
        cls, interaction: discord.Interaction, item: discord.ui.Button, match: re.Match[str], /
    ) -> OrderActionButton:
        return cls(match["action"], match["order_pk"])

    async def callback(self, interaction: discord.Interaction) -> None:
        cog = interaction.client.get_cog(LIFECYCLE_COG_NAME)
        if cog is None:
            logger.error("Order action %s received but %s is not loaded", self.custom_id, LIFECYCLE_COG_NAME)
            await interaction.response.send_message("❌ Błąd.", ephemeral=True)
            return
        await cog.handle_order_action(interaction, self.action, self.order_pk)


def order_action_view(order_pk: Any) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(OrderActionButton(ACTION_CLAIM, order_pk))
    view.add_item(OrderActionButton(ACTION_REJECT, order_pk))
    return view


def processed_view(action: str) -> discord.ui.View:
    if action == ACTION_CLAIM:
        label, style = "PRZYJĘTE", discord.ButtonStyle.success
    else:
        label, style = "ODRZUCONE", discord.ButtonStyle.danger
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(label=label, style=style, custom_id=f"processed_{action}", disabled=True)
    )
    return view

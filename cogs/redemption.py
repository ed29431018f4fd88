"""Order code redemption: turns an NXS code into a private ticket channel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from nexus_core.logger import get_logger
from nexus_core.models import Order, OrderStatus, Ticket
from nexus_core.ticket_ui import admin_mention, build_summary_embed, order_action_view
from nexus_core.utils import (
    extract_nexus_code,
    get_error_message,
    ticket_channel_name,
    ticket_topic,
)

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

TICKET_MEMBER_PERMISSIONS = discord.PermissionOverwrite(
    view_channel=True,
    send_messages=True,
    read_message_history=True,
)


class RedemptionCog(commands.Cog):
    """Watches the verification channel for redemption codes."""

    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return

        verification_channel_id = self.bot.config.channel_ids.verification
        if verification_channel_id and message.channel.id != verification_channel_id:
            return

        code = extract_nexus_code(message.content)
        if code is None:
            return

        logger.info("Redemption code %s received from %s", code, message.author)
        await self.redeem(message, code)

    async def redeem(self, message: discord.Message, code: str) -> Optional[Ticket]:
        """Validate ``code`` and provision a ticket for its order.

        Returns the created ticket, or None when the code was refused or
        provisioning failed. Partial progress is not rolled back.
        """
        db = self.bot.db
        try:
            order = await db.get_order_by_code(code)
            if order is None:
                await message.reply(get_error_message("order_code_not_found", code=code))
                return None

            if order.status is OrderStatus.VERIFIED:
                await message.reply(get_error_message("order_already_verified", code=code))
                return None

            if order.status is OrderStatus.REJECTED:
                await message.reply(get_error_message("order_rejected", code=code))
                return None

            # Check-then-act: two simultaneous redemptions can both pass this.
            if await db.get_active_ticket_for_order(order.order_id):
                await message.reply(get_error_message("ticket_in_progress"))
                return None

            ticket = await db.create_ticket(order.order_id, message.author.id, str(message.author))
            channel = await self._create_ticket_channel(message, order, ticket)

            await db.set_ticket_channel(ticket.id, channel.id)
            await db.link_requester(order.order_id, message.author.id)

            await channel.send(
                content=f"{message.author.mention} | {admin_mention(self.bot.config.admin)}",
                embed=build_summary_embed(order, message.author),
                view=order_action_view(order.id),
            )
            logger.info(
                "Ticket %s provisioned in #%s for order %s (requester %s)",
                ticket.id,
                channel.name,
                order.order_id,
                message.author.id,
            )
        except Exception as e:
            logger.error("Failed to create ticket for code %s: %s", code, e, exc_info=True)
            await message.reply(get_error_message("ticket_create_failed"))
            return None

        try:
            await message.delete()
        except discord.HTTPException:
            pass

        return ticket

    async def _create_ticket_channel(
        self, message: discord.Message, order: Order, ticket: Ticket
    ) -> discord.TextChannel:
        guild = message.guild
        overwrites: dict = {
            guild.default_role: discord.PermissionOverwrite(view_channel=False),
            message.author: TICKET_MEMBER_PERMISSIONS,
        }

        policy = self.bot.config.admin
        if policy.enforced:
            admin_role = guild.get_role(policy.role_id)
            if admin_role is not None:
                overwrites[admin_role] = TICKET_MEMBER_PERMISSIONS
            else:
                logger.warning("Admin role %s not found in guild %s", policy.role_id, guild.id)

        category = None
        if self.bot.config.ticket_category_id:
            found = guild.get_channel(self.bot.config.ticket_category_id)
            if isinstance(found, discord.CategoryChannel):
                category = found
            else:
                logger.warning("Ticket category %s not found", self.bot.config.ticket_category_id)

        return await guild.create_text_channel(
            name=ticket_channel_name(order.order_id),
            category=category,
            topic=ticket_topic(message.author.id, ticket.id),
            overwrites=overwrites,
            reason=f"Order ticket for {order.order_id}",
        )


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(RedemptionCog(bot))

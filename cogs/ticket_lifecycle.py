"""Ticket lifecycle: claim / reject buttons, final status commands and close."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from nexus_core.constants import CLOSE_DELETE_DELAY_SECONDS, COLOR_DANGER, COLOR_SUCCESS
from nexus_core.logger import get_logger
from nexus_core.models import InvalidTransitionError, Order, OrderStatus, ensure_transition
from nexus_core.ticket_ui import (
    ACTION_CLAIM,
    OrderActionButton,
    claimed_embed,
    processed_view,
    rejected_embed,
)
from nexus_core.utils import (
    TicketMetadataError,
    calculate_xp_award,
    create_embed,
    get_error_message,
    is_ticket_channel,
    order_id_from_channel,
    parse_ticket_topic,
)
from nexus_core.utils.permissions import is_admin, require_ticket_admin

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()


def transition_notice(error: InvalidTransitionError) -> str:
    if error.current.is_terminal:
        return get_error_message("order_finalized", status=error.current.value)
    return get_error_message(
        "order_transition_refused", status=error.current.value, target=error.target.value
    )


class TicketLifecycleCog(commands.Cog):
    """Administrative status changes on order tickets."""

    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot

    # ----------------------------------------------------------- claim/reject

    async def handle_order_action(self, interaction: discord.Interaction, action: str, order_pk: str) -> None:
        """Entry point for the claim/reject buttons on a ticket summary."""
        if not is_admin(interaction.user, self.bot.config.admin):
            logger.warning("Non-admin %s attempted %s on order %s", interaction.user.id, action, order_pk)
            await interaction.response.send_message(get_error_message("claim_admin_only"), ephemeral=True)
            return

        if not is_ticket_channel(interaction.channel):
            await interaction.response.send_message(get_error_message("ticket_channel_only"), ephemeral=True)
            return

        target = OrderStatus.ACCEPTED if action == ACTION_CLAIM else OrderStatus.REJECTED

        try:
            order = await self.bot.db.get_order(order_pk)
            if order is None:
                await interaction.response.send_message(get_error_message("order_not_found"), ephemeral=True)
                return

            ensure_transition(order.status, target)
            await interaction.response.defer()

            if action == ACTION_CLAIM:
                await self._claim(interaction, order)
            else:
                await self._reject(interaction, order)
        except InvalidTransitionError as e:
            logger.info("Refused %s on order %s: %s", action, order_pk, e)
            await interaction.response.send_message(transition_notice(e), ephemeral=True)
        except Exception as e:
            logger.error("Interaction error for %s_%s: %s", action, order_pk, e, exc_info=True)
            if not interaction.response.is_done():
                await interaction.response.send_message(get_error_message("interaction_failed"), ephemeral=True)

    def _summary_embed(self, interaction: discord.Interaction):
        message = interaction.message
        if message is not None and message.embeds:
            return message.embeds[0]
        return None

    async def _claim(self, interaction: discord.Interaction, order: Order) -> None:
        admin = interaction.user
        await self.bot.db.update_order_status(order.id, OrderStatus.ACCEPTED, actor_tag=str(admin))
        logger.info("Order %s claimed by %s", order.order_id, admin)

        await interaction.channel.send(f"✅ Zgłoszenie przyjęte przez {admin.mention}.")
        await interaction.edit_original_response(
            embed=claimed_embed(self._summary_embed(interaction), admin),
            view=processed_view(ACTION_CLAIM),
        )

    async def _reject(self, interaction: discord.Interaction, order: Order) -> None:
        admin = interaction.user
        await self.bot.db.update_order_status(order.id, OrderStatus.REJECTED)
        logger.info("Order %s rejected by %s", order.order_id, admin)

        await interaction.edit_original_response(
            embed=rejected_embed(self._summary_embed(interaction), admin),
            view=processed_view("reject"),
        )
        await interaction.channel.send(f"⛔ Zgłoszenie odrzucone przez {admin.mention}.")

    # ---------------------------------------------------------- final status

    @commands.command(name="pomyslnie")
    async def mark_success(self, ctx: commands.Context) -> None:
        """Mark this ticket's order as completed."""
        await self.finalize_order(ctx, success=True)

    @commands.command(name="niepomyslnie")
    async def mark_failure(self, ctx: commands.Context) -> None:
        """Mark this ticket's order as failed."""
        await self.finalize_order(ctx, success=False)

    async def finalize_order(self, ctx: commands.Context, *, success: bool) -> None:
        if not await require_ticket_admin(ctx, self.bot.config.admin, require_topic=True):
            return

        new_status = OrderStatus.COMPLETED if success else OrderStatus.FAILED
        label = "POMYŚLNE" if success else "NIEPOMYŚLNE"

        try:
            order_id = order_id_from_channel(ctx.channel)
        except TicketMetadataError as e:
            logger.warning("Cannot finalize in #%s: %s", ctx.channel.name, e)
            await ctx.reply(get_error_message("order_ticket_only"))
            return

        try:
            order = await self.bot.db.find_order_by_order_id(order_id)
            if order is None:
                await ctx.reply(get_error_message("order_id_not_found", order_id=order_id))
                return

            ensure_transition(order.status, new_status)
            updated = await self.bot.db.update_order_status(order.id, new_status, actor_tag=str(ctx.author))
            order = updated or order
            logger.info("Order %s marked %s by %s", order.order_id, new_status.value, ctx.author)

            embed = create_embed(
                title=f"Status Zamówienia: {label}",
                description=f"Administrator {ctx.author.mention} zmienił status zamówienia na **{label}**.",
                color=COLOR_SUCCESS if success else COLOR_DANGER,
                timestamp=True,
            )
            await ctx.send(embed=embed)

            if success:
                await ctx.send("✅ Transakcja zakończona sukcesem.")
                await self.award_purchase_xp(ctx.channel, order)
            else:
                await ctx.send("⚠️ Transakcja oznaczona jako nieudana.")
        except InvalidTransitionError as e:
            logger.info("Refused %s on order %s: %s", new_status.value, order_id, e)
            await ctx.reply(transition_notice(e))
        except Exception as e:
            logger.error("Failed to set status %s for order %s: %s", new_status.value, order_id, e, exc_info=True)
            await ctx.reply(get_error_message("status_update_failed"))

    async def award_purchase_xp(self, channel: discord.abc.Messageable, order: Order) -> int:
        """Grant purchase XP to the requester. Returns the amount awarded."""
        if not order.discord_user_id:
            return 0

        amount = calculate_xp_award(order.total)
        if amount <= 0:
            return 0

        try:
            await self.bot.db.award_xp(order.discord_user_id, amount, f"Zakup zamówienia #{order.order_id}")
        except Exception as e:
            logger.error("Failed to award %s XP for order %s: %s", amount, order.order_id, e, exc_info=True)
            return 0

        await channel.send(f"⭐ Przyznano **{amount} XP** użytkownikowi za ten zakup!")
        return amount

    # ------------------------------------------------------------------ close

    @commands.command(name="close")
    async def close_ticket(self, ctx: commands.Context) -> None:
        """Close the ticket and delete its channel."""
        if not await require_ticket_admin(ctx, self.bot.config.admin):
            return

        try:
            meta = parse_ticket_topic(ctx.channel.topic, require_ticket=True)
        except TicketMetadataError as e:
            logger.warning("Closing #%s without ticket metadata: %s", ctx.channel.name, e)
        else:
            try:
                await self.bot.db.close_ticket(meta.ticket_id)
                logger.info("Ticket %s closed by %s", meta.ticket_id, ctx.author)
            except Exception as e:
                logger.error("Failed to mark ticket %s closed: %s", meta.ticket_id, e, exc_info=True)

        await ctx.send("🔒 Zamykanie ticketa...")
        await asyncio.sleep(CLOSE_DELETE_DELAY_SECONDS)

        try:
            await ctx.channel.delete(reason=f"Ticket closed by {ctx.author}")
        except discord.HTTPException as e:
            logger.warning("Failed to delete ticket channel %s: %s", ctx.channel.id, e)


async def setup(bot: NexusBot) -> None:
    bot.add_dynamic_items(OrderActionButton)
    await bot.add_cog(TicketLifecycleCog(bot))

"""Typed store operations for orders, tickets and announcements."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .constants import XP_PROCEDURE
from .logger import get_logger
from .models import Announcement, Order, OrderStatus, Ticket, TicketStatus
from .store import StoreError, StoreGateway

logger = get_logger()


class Database:
    """Order/ticket data layer on top of the store gateway."""

    def __init__(self, store: StoreGateway) -> None:
        self.store = store

    # ------------------------------------------------------------------ orders

    async def get_order_by_code(self, nexus_code: str) -> Optional[Order]:
        row = await self.store.select_one("orders", eq={"nexus_code": nexus_code})
        return Order.from_row(row) if row else None

    async def get_order(self, order_pk) -> Optional[Order]:
        row = await self.store.select_one("orders", eq={"id": order_pk})
        return Order.from_row(row) if row else None

    async def find_order_by_order_id(self, order_id: str) -> Optional[Order]:
        """Case-insensitive lookup; Discord lowercases channel names."""
        row = await self.store.select_one("orders", ilike={"order_id": order_id})
        return Order.from_row(row) if row else None

    async def update_order_status(
        self,
        order_pk,
        status: OrderStatus,
        *,
        actor_tag: Optional[str] = None,
    ) -> Optional[Order]:
        values: dict[str, str] = {"status": status.value}
        if actor_tag is not None:
            values["discord_user"] = actor_tag
        rows = await self.store.update("orders", values, eq={"id": order_pk})
        return Order.from_row(rows[0]) if rows else None

    async def count_orders(self, status: OrderStatus) -> int:
        return await self.store.count("orders", eq={"status": status.value})

    async def link_requester(self, order_id: str, discord_user_id: int) -> None:
        """Record the requester on the order and on its redemption code."""
        await self.store.update("orders", {"discord_user_id": str(discord_user_id)}, eq={"order_id": order_id})
        await self.store.update(
            "redemption_codes", {"discord_user_id": str(discord_user_id)}, eq={"order_id": order_id}
        )

    async def award_xp(self, discord_user_id: str, amount: int, reason: str) -> None:
        await self.store.rpc(
            XP_PROCEDURE,
            {"user_discord_id": discord_user_id, "amount": amount, "reason": reason},
        )

    # ----------------------------------------------------------------- tickets

    async def get_active_ticket_for_order(self, order_id: str) -> Optional[Ticket]:
        row = await self.store.select_one(
            "tickets", eq={"order_id": order_id, "status": TicketStatus.ACTIVE.value}
        )
        return Ticket.from_row(row) if row else None

    async def create_ticket(self, order_id: str, customer_id: int, customer_tag: str) -> Ticket:
        rows = await self.store.insert(
            "tickets",
            {
                "order_id": order_id,
                "customer_id": str(customer_id),
                "discord_user_tag": customer_tag,
                "status": TicketStatus.ACTIVE.value,
            },
        )
        if not rows:
            raise StoreError("Ticket insert returned no row")
        ticket = Ticket.from_row(rows[0])
        logger.info("Created ticket %s for order %s", ticket.id, order_id)
        return ticket

    async def set_ticket_channel(self, ticket_id: str, channel_id: int) -> None:
        await self.store.update("tickets", {"channel_id": str(channel_id)}, eq={"id": ticket_id})

    async def close_ticket(self, ticket_id: str, *, closed_at: Optional[datetime] = None) -> None:
        closed_at = closed_at or datetime.now(timezone.utc)
        await self.store.update(
            "tickets",
            {"status": TicketStatus.CLOSED.value, "closed_at": closed_at.isoformat()},
            eq={"id": ticket_id},
        )

    async def log_ticket_message(
        self,
        ticket_id: str,
        *,
        author_name: str,
        author_tag: str,
        content: str,
        is_bot: bool,
    ) -> None:
        await self.store.insert(
            "ticket_messages",
            {
                "ticket_id": ticket_id,
                "author_name": author_name,
                "author_tag": author_tag,
                "content": content,
                "is_bot": is_bot,
            },
        )

    # ----------------------------------------------------------- announcements

    async def get_announcement(self, announcement_id: str) -> Optional[Announcement]:
        row = await self.store.select_one(
            "announcements", "id,discord_message_id", eq={"id": announcement_id}
        )
        return Announcement.from_row(row) if row else None

    async def save_announcement(self, announcement_id: str, discord_message_id: int) -> None:
        await self.store.upsert(
            "announcements", {"id": announcement_id, "discord_message_id": str(discord_message_id)}
        )

    async def delete_announcement(self, announcement_id: str) -> None:
        await self.store.delete("announcements", eq={"id": announcement_id})

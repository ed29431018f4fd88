"""Ticket channel naming and topic conventions.

A ticket channel is named ``order-<orderId>`` and its topic carries
``<customerId>:<ticketUUID>``. Both are relied upon by every ticket command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..constants import TICKET_CHANNEL_PREFIX


class TicketMetadataError(ValueError):
    """A channel is not a ticket channel or its topic cannot be parsed."""


@dataclass(frozen=True)
class TicketChannelMeta:
    customer_id: int
    ticket_id: Optional[str] = None


def ticket_channel_name(order_id: str) -> str:
    return f"{TICKET_CHANNEL_PREFIX}{order_id}"


def ticket_topic(customer_id: int, ticket_id: str) -> str:
    return f"{customer_id}:{ticket_id}"


def is_ticket_channel(channel: Any) -> bool:
    name = getattr(channel, "name", None)
    return isinstance(name, str) and name.startswith(TICKET_CHANNEL_PREFIX)


def order_id_from_channel(channel: Any) -> str:
    """Return the order id encoded in a ticket channel name."""
    if not is_ticket_channel(channel):
        raise TicketMetadataError(f"{getattr(channel, 'name', channel)!r} is not a ticket channel")
    order_id = channel.name[len(TICKET_CHANNEL_PREFIX):]
    if not order_id:
        raise TicketMetadataError(f"Channel {channel.name!r} carries no order id")
    return order_id


def parse_ticket_topic(topic: Optional[str], *, require_ticket: bool = False) -> TicketChannelMeta:
    """
    Parse ``<customerId>:<ticketUUID>`` from a channel topic.

    Args:
        topic: Raw channel topic
        require_ticket: Fail when the ticket UUID part is missing

    Raises:
        TicketMetadataError: if the topic is empty or malformed
    """
    if not topic:
        raise TicketMetadataError("Channel has no topic")

    customer_part, _, ticket_part = topic.strip().partition(":")
    customer_part = customer_part.strip()
    ticket_part = ticket_part.strip()

    if not customer_part.isdigit():
        raise TicketMetadataError(f"Topic {topic!r} does not start with a customer id")
    if require_ticket and not ticket_part:
        raise TicketMetadataError(f"Topic {topic!r} carries no ticket id")

    return TicketChannelMeta(customer_id=int(customer_part), ticket_id=ticket_part or None)

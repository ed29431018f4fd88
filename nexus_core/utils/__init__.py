"""Shared utilities for the Nexus Store bot."""

from .channels import (
    TicketChannelMeta,
    TicketMetadataError,
    is_ticket_channel,
    order_id_from_channel,
    parse_ticket_topic,
    ticket_channel_name,
    ticket_topic,
)
from .codes import extract_nexus_code
from .embeds import create_embed
from .error_messages import get_error_message
from .timestamps import local_timestamp
from .xp import calculate_xp_award

__all__ = [
    "TicketChannelMeta",
    "TicketMetadataError",
    "is_ticket_channel",
    "order_id_from_channel",
    "parse_ticket_topic",
    "ticket_channel_name",
    "ticket_topic",
    "extract_nexus_code",
    "create_embed",
    "get_error_message",
    "local_timestamp",
    "calculate_xp_award",
]

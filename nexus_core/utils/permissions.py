"""Administrator checks driven by the configured admin policy."""

from __future__ import annotations

from typing import Any, Optional

from nexus_core.config import AdminPolicy

from .channels import is_ticket_channel
from .error_messages import get_error_message


def is_admin(member: Optional[Any], policy: AdminPolicy) -> bool:
    """
    Check whether a member may run administrative actions.

    With a disabled policy every caller passes. With an enforced policy the
    member must hold the configured role; callers outside a guild (no
    member object) fail.

    Examples:
        >>> is_admin(message.author, bot.config.admin)
        True
    """
    if not policy.enforced:
        return True
    if member is None:
        return False
    return any(role.id == policy.role_id for role in getattr(member, "roles", []))


async def require_ticket_admin(ctx: Any, policy: AdminPolicy, *, require_topic: bool = False) -> bool:
    """
    Gate a text command to administrators inside ticket channels.

    Replies with the matching notice and returns False when the caller or
    channel does not qualify.
    """
    if not is_admin(ctx.author, policy):
        await ctx.reply(get_error_message("admin_only"))
        return False

    if not is_ticket_channel(ctx.channel):
        await ctx.reply(get_error_message("order_ticket_only" if require_topic else "ticket_channel_only"))
        return False

    if require_topic and not getattr(ctx.channel, "topic", None):
        await ctx.reply(get_error_message("order_ticket_only"))
        return False

    return True

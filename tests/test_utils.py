from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import discord
import pytest

from nexus_core.config import AdminPolicy
from nexus_core.constants import COLOR_INFO
from nexus_core.utils import (
    TicketMetadataError,
    calculate_xp_award,
    create_embed,
    extract_nexus_code,
    get_error_message,
    is_ticket_channel,
    local_timestamp,
    order_id_from_channel,
    parse_ticket_topic,
    ticket_channel_name,
    ticket_topic,
)
from nexus_core.utils.permissions import is_admin, require_ticket_admin

from conftest import MockContext, MockDiscordMember, MockDiscordRole, MockTextChannel


# --------------------------------------------------------------------- codes

def test_extract_nexus_code_uppercases_first_match() -> None:
    assert extract_nexus_code("hej, mój kod to nxs-ab12-cd34 dzięki") == "NXS-AB12-CD34"
    assert extract_nexus_code("NXS-AAAA-BBBB i NXS-CCCC-DDDD") == "NXS-AAAA-BBBB"


@pytest.mark.parametrize("text", [None, "", "hello", "NXS-AB1-CD34", "NXS_AB12_CD34"])
def test_extract_nexus_code_without_match(text) -> None:
    assert extract_nexus_code(text) is None


# ------------------------------------------------------------------------ xp

@pytest.mark.parametrize(
    ("total", "expected"),
    [
        (Decimal("12.50"), 125),
        (Decimal("0.99"), 9),
        (Decimal("10.019"), 100),
        ("7", 70),
        (0, 0),
        (Decimal("-5"), 0),
    ],
)
def test_calculate_xp_award(total, expected) -> None:
    assert calculate_xp_award(total) == expected


# ------------------------------------------------------------------ channels

def test_ticket_channel_conventions() -> None:
    assert ticket_channel_name("ABC123") == "order-ABC123"
    assert ticket_topic(3003, "uuid-1") == "3003:uuid-1"


def test_is_ticket_channel() -> None:
    assert is_ticket_channel(SimpleNamespace(name="order-abc123")) is True
    assert is_ticket_channel(SimpleNamespace(name="general")) is False
    assert is_ticket_channel(SimpleNamespace()) is False


def test_order_id_from_channel() -> None:
    assert order_id_from_channel(SimpleNamespace(name="order-abc123")) == "abc123"

    with pytest.raises(TicketMetadataError):
        order_id_from_channel(SimpleNamespace(name="general"))
    with pytest.raises(TicketMetadataError):
        order_id_from_channel(SimpleNamespace(name="order-"))


def test_parse_ticket_topic() -> None:
    meta = parse_ticket_topic("3003:6f1c-uuid")
    assert meta.customer_id == 3003
    assert meta.ticket_id == "6f1c-uuid"

    legacy = parse_ticket_topic("3003")
    assert legacy.customer_id == 3003
    assert legacy.ticket_id is None


@pytest.mark.parametrize("topic", [None, "", "not-a-number:uuid", ":uuid"])
def test_parse_ticket_topic_rejects_malformed(topic) -> None:
    with pytest.raises(TicketMetadataError):
        parse_ticket_topic(topic)


def test_parse_ticket_topic_can_require_ticket_id() -> None:
    with pytest.raises(TicketMetadataError):
        parse_ticket_topic("3003", require_ticket=True)


def test_ticket_metadata_error_is_value_error() -> None:
    assert issubclass(TicketMetadataError, ValueError)


# -------------------------------------------------------------------- embeds

def test_create_embed_defaults() -> None:
    embed = create_embed(title="Title", description="Body")
    assert embed.title == "Title"
    assert embed.description == "Body"
    assert embed.color == discord.Color(COLOR_INFO)
    assert embed.timestamp is None


def test_create_embed_with_footer_and_timestamp() -> None:
    embed = create_embed(title="Title", footer="Footer", timestamp=True)
    assert embed.footer.text == "Footer"
    assert embed.timestamp is not None


# ------------------------------------------------------------ error messages

def test_get_error_message_formats_arguments() -> None:
    message = get_error_message("order_code_not_found", code="NXS-AB12-CD34")
    assert "NXS-AB12-CD34" in message


def test_get_error_message_unknown_key_falls_back() -> None:
    assert get_error_message("nope").startswith("❌")


def test_get_error_message_missing_argument_falls_back() -> None:
    assert get_error_message("order_code_not_found") == "❌ Order code not found."


# ---------------------------------------------------------------- timestamps

def test_local_timestamp_treats_naive_as_utc() -> None:
    aware = datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc)
    naive = datetime(2024, 3, 1, 12, 30, 5)
    assert local_timestamp(naive) == local_timestamp(aware)
    assert local_timestamp(aware).count(".") == 2


# --------------------------------------------------------------- permissions

def test_is_admin_with_enforced_policy() -> None:
    policy = AdminPolicy.enforced_by(42)
    admin = MockDiscordMember(1, roles=[MockDiscordRole(42)])
    member = MockDiscordMember(2, roles=[MockDiscordRole(7)])

    assert is_admin(admin, policy) is True
    assert is_admin(member, policy) is False
    assert is_admin(None, policy) is False


def test_is_admin_with_disabled_policy_lets_everyone_through() -> None:
    assert is_admin(MockDiscordMember(2), AdminPolicy.disabled()) is True
    assert is_admin(None, AdminPolicy.disabled()) is True


@pytest.mark.asyncio
async def test_require_ticket_admin_rejects_non_admin() -> None:
    ctx = MockContext(MockDiscordMember(2), MockTextChannel(1, "order-abc", topic="2:uuid"))

    assert await require_ticket_admin(ctx, AdminPolicy.enforced_by(42)) is False
    assert ctx.replies == [get_error_message("admin_only")]


@pytest.mark.asyncio
async def test_require_ticket_admin_rejects_other_channels() -> None:
    ctx = MockContext(MockDiscordMember(2), MockTextChannel(1, "general"))

    assert await require_ticket_admin(ctx, AdminPolicy.disabled()) is False
    assert ctx.replies == [get_error_message("ticket_channel_only")]


@pytest.mark.asyncio
async def test_require_ticket_admin_can_require_topic() -> None:
    ctx = MockContext(MockDiscordMember(2), MockTextChannel(1, "order-abc", topic=None))

    assert await require_ticket_admin(ctx, AdminPolicy.disabled(), require_topic=True) is False
    assert ctx.replies == [get_error_message("order_ticket_only")]

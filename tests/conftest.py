from __future__ import annotations

import itertools
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import MagicMock

import discord
import pytest

from nexus_core.config import AdminPolicy, ChannelIDs, Config, PaymentSettings, StoreSettings
from nexus_core.database import Database
from nexus_core.models import Order, OrderItem, OrderStatus

ADMIN_ROLE_ID = 42
VERIFICATION_CHANNEL_ID = 700001

_message_ids = itertools.count(900000)


class MockDiscordRole:
    def __init__(self, role_id: int, name: str = "Role") -> None:
        self.id = role_id
        self.name = name


class MockDiscordMember:
    def __init__(
        self,
        member_id: int,
        name: str = "Member",
        *,
        roles: Optional[list[MockDiscordRole]] = None,
        bot: bool = False,
    ) -> None:
        self.id = member_id
        self.name = name
        self.display_name = name
        self.roles = roles or []
        self.bot = bot
        self.mention = f"<@{member_id}>"
        self.display_avatar = SimpleNamespace(url=f"https://cdn.example/avatars/{member_id}.png")
        self.guild: Any = None
        self.sent_messages: list[dict] = []
        self.fail_dm = False

    def __str__(self) -> str:
        return self.name

    async def send(self, content: Optional[str] = None, *, file=None, embed=None) -> None:
        if self.fail_dm:
            raise discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Cannot send messages to this user")
        self.sent_messages.append({"content": content, "file": file, "embed": embed})


class MockMessage:
    def __init__(
        self,
        content: str = "",
        *,
        author: Optional[MockDiscordMember] = None,
        channel: Optional["MockTextChannel"] = None,
        guild: Optional["MockGuild"] = None,
        embeds: Optional[list] = None,
        created_at=None,
    ) -> None:
        self.id = next(_message_ids)
        self.content = content
        self.author = author
        self.channel = channel
        self.guild = guild
        self.embeds = embeds or []
        self.created_at = created_at
        self.replies: list[str] = []
        self.deleted = False

    async def reply(self, content: Optional[str] = None, **kwargs) -> None:
        self.replies.append(content)

    async def delete(self) -> None:
        self.deleted = True


class MockTextChannel:
    def __init__(self, channel_id: int, name: str = "general", *, topic: Optional[str] = None) -> None:
        self.id = channel_id
        self.name = name
        self.topic = topic
        self.messages: list[dict] = []
        self.history_messages: list[MockMessage] = []
        self.deleted = False
        self.delete_error: Optional[Exception] = None

    async def send(self, content: Optional[str] = None, *, embed=None, view=None, file=None) -> MockMessage:
        self.messages.append({"content": content, "embed": embed, "view": view, "file": file})
        message = MockMessage(content or "", channel=self, embeds=[embed] if embed else [])
        self.history_messages.append(message)
        return message

    async def history(self, limit: int = 100):
        # Newest first, like discord.py
        for message in list(reversed(self.history_messages))[:limit]:
            yield message

    async def fetch_message(self, message_id: int) -> MockMessage:
        for message in self.history_messages:
            if message.id == message_id:
                return message
        raise discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Message")

    async def delete(self, *, reason: Optional[str] = None) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted = True


class MockGuild:
    def __init__(self, guild_id: int = 987654321) -> None:
        self.id = guild_id
        self.default_role = MockDiscordRole(guild_id, name="@everyone")
        self.member_count = 128
        self._roles: dict[int, MockDiscordRole] = {}
        self._channels: dict[int, MockTextChannel] = {}
        self._next_channel_id = itertools.count(500001)
        self.created_channels: list[dict] = []

    def add_role(self, role: MockDiscordRole) -> None:
        self._roles[role.id] = role

    def get_role(self, role_id: int) -> Optional[MockDiscordRole]:
        return self._roles.get(role_id)

    def add_channel(self, channel: MockTextChannel) -> None:
        self._channels[channel.id] = channel

    def get_channel(self, channel_id: int) -> Optional[MockTextChannel]:
        return self._channels.get(channel_id)

    async def create_text_channel(self, name: str, *, category=None, topic=None, overwrites=None, reason=None):
        channel = MockTextChannel(next(self._next_channel_id), name, topic=topic)
        self.created_channels.append(
            {"channel": channel, "category": category, "overwrites": overwrites, "reason": reason}
        )
        self.add_channel(channel)
        return channel


class MockContext:
    def __init__(self, author: MockDiscordMember, channel: MockTextChannel, guild: Optional[MockGuild] = None) -> None:
        self.author = author
        self.channel = channel
        self.guild = guild
        self.message = MockMessage("", author=author, channel=channel, guild=guild)
        self.replies: list[str] = []
        self.sent: list[dict] = []

    async def reply(self, content: Optional[str] = None, **kwargs) -> None:
        self.replies.append(content)

    async def send(self, content: Optional[str] = None, *, embed=None, file=None) -> None:
        self.sent.append({"content": content, "embed": embed, "file": file})


class MockInteractionResponse:
    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.deferred = False

    def is_done(self) -> bool:
        return self.deferred or bool(self.messages)

    async def send_message(self, content: Optional[str] = None, *, ephemeral: bool = False) -> None:
        self.messages.append({"content": content, "ephemeral": ephemeral})

    async def defer(self) -> None:
        self.deferred = True


class MockInteraction:
    def __init__(self, user: MockDiscordMember, channel: MockTextChannel, *, message: Optional[MockMessage] = None) -> None:
        self.user = user
        self.channel = channel
        self.message = message
        self.response = MockInteractionResponse()
        self.edits: list[dict] = []

    async def edit_original_response(self, **kwargs) -> None:
        self.edits.append(kwargs)


class MockBot:
    def __init__(self, config: Config, db: Any, guild: MockGuild) -> None:
        self.config = config
        self.db = db
        self.guild = guild
        self.user = MockDiscordMember(1, "NexusBot", bot=True)
        self.store = MagicMock()
        self.users: dict[int, MockDiscordMember] = {}
        self.presences: list[dict] = []

    def get_channel(self, channel_id: int) -> Optional[MockTextChannel]:
        return self.guild.get_channel(channel_id)

    async def fetch_user(self, user_id: int) -> MockDiscordMember:
        if user_id not in self.users:
            raise discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown User")
        return self.users[user_id]

    async def change_presence(self, **kwargs) -> None:
        self.presences.append(kwargs)

    async def wait_until_ready(self) -> None:
        return None


@pytest.fixture
def sample_config() -> Config:
    return Config(
        token="TEST",
        store=StoreSettings(url="https://project.supabase.co", service_key="service-role-key"),
        admin=AdminPolicy.enforced_by(ADMIN_ROLE_ID),
        channel_ids=ChannelIDs(
            verification=VERIFICATION_CHANNEL_ID,
            announcements=700002,
            rules=700003,
            links=700004,
            shop_info=700005,
            entry=700006,
            exit=700007,
        ),
        payment=PaymentSettings(blik_phone_number="575 374 776"),
    )


@pytest.fixture
def mock_db() -> MagicMock:
    return MagicMock(spec=Database)


@pytest.fixture
def mock_guild() -> MockGuild:
    guild = MockGuild()
    guild.add_role(MockDiscordRole(ADMIN_ROLE_ID, name="Admin"))
    guild.add_channel(MockTextChannel(VERIFICATION_CHANNEL_ID, "weryfikacja"))
    return guild


@pytest.fixture
def mock_bot(sample_config: Config, mock_db: MagicMock, mock_guild: MockGuild) -> MockBot:
    return MockBot(sample_config, mock_db, mock_guild)


@pytest.fixture
def admin_member(mock_guild: MockGuild) -> MockDiscordMember:
    member = MockDiscordMember(2002, "StaffMember", roles=[mock_guild.get_role(ADMIN_ROLE_ID)])
    member.guild = mock_guild
    return member


@pytest.fixture
def customer_member(mock_guild: MockGuild) -> MockDiscordMember:
    member = MockDiscordMember(3003, "Customer")
    member.guild = mock_guild
    return member


@pytest.fixture
def sample_order() -> Order:
    return Order(
        id="11111111-2222-3333-4444-555555555555",
        order_id="ABC123",
        nexus_code="NXS-AB12-CD34",
        status=OrderStatus.PENDING,
        email="buyer@example.com",
        total=Decimal("12.50"),
        currency="PLN",
        items=[
            OrderItem(title="FiveM Bundle", variant_name="Gold", qty=1),
            OrderItem(title="Car Pack", variant_name="Sport", qty=2),
        ],
    )


@pytest.fixture
def ticket_channel(mock_guild: MockGuild, customer_member: MockDiscordMember) -> MockTextChannel:
    channel = MockTextChannel(600001, "order-abc123", topic=f"{customer_member.id}:ticket-uuid-1")
    mock_guild.add_channel(channel)
    return channel

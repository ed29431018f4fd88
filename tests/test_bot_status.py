from __future__ import annotations

from unittest.mock import patch

import discord
import pytest

from cogs.bot_status import BotStatusCog, presence_options
from nexus_core.models import OrderStatus


def test_presence_options() -> None:
    options = presence_options(17)

    assert [(option.type, option.name) for option in options] == [
        (discord.ActivityType.watching, "NexusStore"),
        (discord.ActivityType.watching, "17 Verified Orders"),
        (discord.ActivityType.playing, "New Products"),
        (discord.ActivityType.listening, "!help | DM for Support"),
    ]


@pytest.mark.asyncio
async def test_update_presence_uses_verified_count(mock_bot) -> None:
    mock_bot.db.count_orders.return_value = 17
    cog = BotStatusCog(mock_bot)

    with patch("cogs.bot_status.random.choice", side_effect=lambda options: options[1]):
        await cog.update_presence()

    mock_bot.db.count_orders.assert_awaited_once_with(OrderStatus.VERIFIED)
    presence = mock_bot.presences[0]
    assert presence["status"] is discord.Status.online
    assert presence["activity"].name == "17 Verified Orders"


@pytest.mark.asyncio
async def test_update_presence_failure_leaves_presence_unchanged(mock_bot) -> None:
    mock_bot.db.count_orders.side_effect = RuntimeError("store down")
    cog = BotStatusCog(mock_bot)

    await cog.update_presence()

    assert mock_bot.presences == []


def test_presence_task_interval() -> None:
    assert BotStatusCog.presence_task.seconds == 30

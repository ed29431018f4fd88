from __future__ import annotations

import pytest

from cogs.setup import SetupCog, build_links_embed, build_rules_embed
from conftest import MockContext, MockTextChannel
from nexus_core.utils import get_error_message

RULES_CHANNEL_ID = 700003
LINKS_CHANNEL_ID = 700004


@pytest.fixture
def cog(mock_bot):
    return SetupCog(mock_bot)


def test_rules_embed_lists_four_rules() -> None:
    embed = build_rules_embed()

    assert embed.title == "📜 NEXUS STORE RULES"
    assert [field.name for field in embed.fields] == ["1️⃣ Respect", "2️⃣ No Spam", "3️⃣ Legit Products", "4️⃣ Support"]
    assert embed.footer.text == "NexusStore Official Rules"


def test_links_embed_uses_shop_url() -> None:
    embed = build_links_embed("https://myweb-psi-three.vercel.app", "https://cdn.example/avatar.png")

    assert embed.fields[0].value == "[myweb-psi-three.vercel.app](https://myweb-psi-three.vercel.app)"
    assert embed.thumbnail.url == "https://cdn.example/avatar.png"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("panel", "channel_id", "title", "confirmation"),
    [
        ("rules", RULES_CHANNEL_ID, "📜 NEXUS STORE RULES", "✅ Rules posted!"),
        ("links", LINKS_CHANNEL_ID, "🔗 OFFICIAL LINKS", "✅ Links posted!"),
    ],
)
async def test_setup_posts_panel(cog, mock_guild, admin_member, panel, channel_id, title, confirmation):
    target = MockTextChannel(channel_id, panel)
    mock_guild.add_channel(target)
    ctx = MockContext(admin_member, MockTextChannel(1, "admin"))

    await cog.setup_panel.callback(cog, ctx, panel)

    assert target.messages[0]["embed"].title == title
    assert ctx.replies == [confirmation]


@pytest.mark.asyncio
async def test_setup_missing_channel(cog, admin_member):
    ctx = MockContext(admin_member, MockTextChannel(1, "admin"))

    await cog.setup_panel.callback(cog, ctx, "rules")

    assert ctx.replies == [get_error_message("setup_channel_missing", variable="RULES_CHANNEL_ID")]


@pytest.mark.asyncio
async def test_setup_unknown_panel(cog, admin_member):
    ctx = MockContext(admin_member, MockTextChannel(1, "admin"))

    await cog.setup_panel.callback(cog, ctx, "faq")

    assert ctx.replies == [get_error_message("setup_usage")]


@pytest.mark.asyncio
async def test_setup_requires_admin(cog, mock_guild, customer_member):
    target = MockTextChannel(RULES_CHANNEL_ID, "rules")
    mock_guild.add_channel(target)
    ctx = MockContext(customer_member, MockTextChannel(1, "general"))

    await cog.setup_panel.callback(cog, ctx, "rules")

    assert ctx.replies == [get_error_message("admin_only")]
    assert target.messages == []

"""Announces newly inserted products from the store's realtime feed."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING, Any, Optional

import discord
from discord.ext import commands

from nexus_core.constants import (
    COLOR_PRODUCT,
    PRODUCT_PRICE_CURRENCY,
    PRODUCT_SYNC_CHANNEL,
    retry_policy,
)
from nexus_core.logger import get_logger
from nexus_core.models import Product
from nexus_core.realtime import RealtimeChannel, SubscriptionStatus
from nexus_core.utils import create_embed

if TYPE_CHECKING:
    from bot import NexusBot

logger = get_logger()

SUBSCRIBE_OPERATION = "product_sync_subscribe"


def build_product_embed(product: Product, shop_url: str) -> discord.Embed:
    description = f"**{product.title}** is now available in the store!\n\n{product.description}"
    embed = create_embed(
        title="✨ NEW PRODUCT ADDED!",
        description=description.rstrip(),
        color=COLOR_PRODUCT,
        timestamp=True,
    )
    embed.add_field(
        name="💰 Price",
        value=f"Starting from **{product.starting_price} {PRODUCT_PRICE_CURRENCY}**",
        inline=True,
    )
    embed.add_field(name="🔗 Check it out", value=f"[Click here to buy]({shop_url})", inline=True)
    if product.image_url:
        embed.set_image(url=product.image_url)
    return embed


class ProductSyncCog(commands.Cog):
    """Listens for product inserts and posts them to the shop-info channel."""

    def __init__(self, bot: NexusBot) -> None:
        self.bot = bot
        self.policy = retry_policy(SUBSCRIBE_OPERATION)
        self.channel: Optional[RealtimeChannel] = None
        self._started = False

    async def cog_unload(self) -> None:
        if self.channel is not None:
            await self.channel.unsubscribe()
            self.channel = None

    @commands.Cog.listener()
    async def on_ready(self) -> None:
        # on_ready fires again after reconnects
        if self._started:
            return
        self._started = True
        self.subscribe()

    def subscribe(self, retries_left: Optional[int] = None) -> RealtimeChannel:
        if retries_left is None:
            retries_left = self.policy.max_attempts

        logger.info("Starting realtime product sync listener (%s retries left)", retries_left)
        channel = self.bot.store.channel(PRODUCT_SYNC_CHANNEL).on_insert("products", self.announce_product)
        self.channel = channel
        channel.subscribe(partial(self.handle_status, retries_left))
        return channel

    async def handle_status(
        self, retries_left: int, status: SubscriptionStatus, error: Optional[Exception] = None
    ) -> None:
        logger.info("Realtime product sync status: %s", status.value)
        if error is not None:
            logger.error("Realtime product sync error: %s", error)

        if not self.policy.retryable or status.value not in self.policy.retry_on:
            return
        if retries_left <= 0:
            logger.error("Realtime product sync gave up after %s attempts", self.policy.max_attempts)
            return

        logger.warning("Retrying product subscription in %ss (%s attempts left)", self.policy.backoff_seconds, retries_left)
        await asyncio.sleep(self.policy.backoff_seconds)
        self.subscribe(retries_left - 1)

    async def announce_product(self, record: dict[str, Any]) -> None:
        product = Product.from_record(record)
        logger.info("Received realtime event for new product: %s", product.title)

        channel_id = self.bot.config.channel_ids.shop_info
        channel = self.bot.get_channel(channel_id) if channel_id else None
        if channel is None:
            logger.warning("SHOP_INFO_CHANNEL_ID not found or bot lacks access to it.")
            return

        try:
            await channel.send(embed=build_product_embed(product, self.bot.config.shop_url))
        except discord.HTTPException as e:
            logger.error("Error sending product embed for %s: %s", product.title, e)


async def setup(bot: NexusBot) -> None:
    await bot.add_cog(ProductSyncCog(bot))

"""
Logging setup for the Nexus Store bot.

Console logging on stdout plus an optional handler that mirrors errors
into a Discord channel.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

LOGGER_NAME = "nexus_core"
LOG_FORMAT = "[%(asctime)s] %(levelname)s:%(name)s: %(message)s"
DISCORD_MESSAGE_LIMIT = 2000

logger: Optional[logging.Logger] = None


class DiscordHandler(logging.Handler):
    """Logging handler that forwards records to a Discord text channel."""

    def __init__(self, bot=None, channel_id: Optional[int] = None):
        super().__init__()
        self.bot = bot
        self.channel_id = channel_id

    def emit(self, record: logging.LogRecord) -> None:
        if not (self.bot and self.channel_id):
            return

        channel = self.bot.get_channel(self.channel_id)
        if not channel:
            return

        try:
            msg = f"**{record.levelname}**: {record.getMessage()}"
            if record.exc_info:
                trace = self.format(record)
                if len(trace) > 1850:
                    trace = trace[:1850] + "... (truncated)"
                msg = f"{msg}\n```{trace}```"
        except Exception:
            msg = f"**{record.levelname}**: {record.msg}"

        if len(msg) > DISCORD_MESSAGE_LIMIT:
            msg = msg[: DISCORD_MESSAGE_LIMIT - 3] + "..."

        self._schedule_send(channel, msg)

    def _schedule_send(self, channel, message: str) -> None:
        try:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = getattr(self.bot, "loop", None)
            if loop is None or not loop.is_running():
                return
            asyncio.run_coroutine_threadsafe(self._send_to_discord(channel, message), loop)
        except Exception as e:
            # stderr only, logging here would recurse
            print(f"DiscordHandler: Failed to schedule message: {e}", file=sys.stderr)

    async def _send_to_discord(self, channel, message: str) -> None:
        try:
            await channel.send(message)
        except Exception as e:
            print(f"DiscordHandler: Failed to send message: {e}", file=sys.stderr)


def setup_logger(
    level: int = logging.INFO,
    enable_discord: bool = False,
    bot=None,
    error_channel_id: Optional[int] = None,
) -> logging.Logger:
    """
    Configure the shared ``nexus_core`` logger.

    Args:
        level: Logging level for the logger and console handler
        enable_discord: Whether to mirror errors into a Discord channel
        bot: Bot instance used to resolve the error channel
        error_channel_id: Channel receiving ERROR and above

    Returns:
        Configured logger instance
    """
    global logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(console_handler)

    if enable_discord and bot and error_channel_id:
        error_handler = DiscordHandler(bot, error_channel_id)
        error_handler.setLevel(logging.ERROR)
        logger.addHandler(error_handler)

    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    """Return the shared logger, creating a console-only one if needed."""
    global logger
    if logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)
            logger.propagate = False
    return logger


logger = get_logger()

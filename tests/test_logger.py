"""Test the logger module."""

import logging
from unittest.mock import MagicMock, patch

from nexus_core.logger import LOGGER_NAME, DiscordHandler, get_logger, setup_logger


def test_get_logger_returns_shared_logger():
    logger = get_logger()
    assert logger is not None
    assert logger.name == LOGGER_NAME
    assert logger is get_logger()


def test_setup_logger_creates_configured_logger():
    logger = setup_logger(level=logging.DEBUG)
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_setup_logger_adds_discord_handler_when_enabled():
    bot = MagicMock()
    logger = setup_logger(level=logging.INFO, enable_discord=True, bot=bot, error_channel_id=555)

    discord_handlers = [h for h in logger.handlers if isinstance(h, DiscordHandler)]
    assert len(discord_handlers) == 1
    assert discord_handlers[0].level == logging.ERROR
    assert discord_handlers[0].channel_id == 555

    setup_logger()


def test_setup_logger_skips_discord_handler_without_channel():
    logger = setup_logger(enable_discord=True, bot=MagicMock(), error_channel_id=None)
    assert not any(isinstance(h, DiscordHandler) for h in logger.handlers)


def test_discord_handler_creation():
    handler = DiscordHandler()
    assert handler.bot is None
    assert handler.channel_id is None


def test_discord_handler_ignores_records_without_channel():
    bot = MagicMock()
    bot.get_channel.return_value = None
    handler = DiscordHandler(bot=bot, channel_id=12345)

    with patch.object(handler, "_schedule_send") as schedule:
        handler.emit(logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "boom", None, None))

    schedule.assert_not_called()


def test_discord_handler_truncates_long_messages():
    bot = MagicMock()
    channel = MagicMock()
    bot.get_channel.return_value = channel
    handler = DiscordHandler(bot=bot, channel_id=12345)

    with patch.object(handler, "_schedule_send") as schedule:
        handler.emit(logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "x" * 5000, None, None))

    sent_channel, message = schedule.call_args[0]
    assert sent_channel is channel
    assert message.startswith("**ERROR**: ")
    assert len(message) <= 2000
    assert message.endswith("...")


def test_discord_handler_without_running_loop_does_not_raise():
    bot = MagicMock()
    bot.loop = None
    handler = DiscordHandler(bot=bot, channel_id=12345)

    handler._schedule_send(MagicMock(), "message")

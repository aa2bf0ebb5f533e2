"""Main entry point for the hangout bot."""

import asyncio
import logging
import sys

from .config.config_loader import load_config
from .plugins.hangouts import HangoutPlugin
from .telegram.client import TelegramClient
from .telegram.message_extractor import MessageExtractor
from .telegram.robot import TelegramRobot
from .utils.logging import parse_verbosity, setup_logging

logger = logging.getLogger(__name__)

VERBOSITY_FLAGS = ["-v", "-vv", "-vvv"]


async def detect_bot_username(config, telegram_client: TelegramClient):
    """Configured bot username, or the one Telegram reports for the token."""
    if config.telegram.bot_username:
        logger.info(f"Using configured bot username: @{config.telegram.bot_username}")
        return config.telegram.bot_username

    logger.info("Auto-detecting bot username from Telegram API...")
    bot_info = await telegram_client.bot.get_me()
    logger.info(f"✓ Bot username detected: @{bot_info.username}")
    return bot_info.username


async def main(config_path: str = "config.yaml"):
    """Load configuration, register the plugin and serve until interrupted."""
    logger.info("=" * 60)
    logger.info("Hangout Bot - Starting")
    logger.info("=" * 60)

    logger.info(f"[1/4] Loading configuration from: {config_path}")
    try:
        config = load_config(config_path)
        logger.info("✓ Configuration loaded successfully")
    except Exception as e:
        logger.error(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    logger.info("[2/4] Initializing Telegram client")
    logger.info(f"  Mode: {config.telegram.mode}")
    if config.telegram.mode == "webhook":
        logger.info(f"  Webhook URL: {config.telegram.webhook_url}")
    telegram_client = TelegramClient(
        bot_token=config.telegram.bot_token,
        mode=config.telegram.mode,
        webhook_url=config.telegram.webhook_url,
        poll_interval=config.telegram.poll_interval,
        webhook_port=config.telegram.webhook_port,
    )

    message_extractor = MessageExtractor(config)
    if config.telegram.require_mention:
        try:
            bot_username = await detect_bot_username(config, telegram_client)
        except Exception as e:
            logger.error(f"✗ Failed to auto-detect bot username: {e}")
            logger.error("  Set telegram.bot_username in config.yaml or disable require_mention")
            sys.exit(1)
        message_extractor.set_bot_username(bot_username)
        logger.info(f"✓ @Mention filtering enabled for @{bot_username}")
    else:
        logger.info("@Mention filtering disabled - responding to all allowed messages")

    robot = TelegramRobot(telegram_client, message_extractor)
    logger.info("✓ Telegram client ready")

    logger.info("[3/4] Registering hangout plugin")
    try:
        plugin = HangoutPlugin(config.hangouts)
    except ValueError as e:
        logger.error(f"✗ Invalid hangout plugin configuration: {e}")
        sys.exit(1)

    if await plugin.register(robot):
        logger.info(f"✓ {plugin.get_name()}: {plugin.get_description()}")
        logger.info(f"  Calendar: {config.hangouts.id}")
        logger.info(f"  Duration: {config.hangouts.duration} ms")
    else:
        logger.warning("✗ Hangout command unavailable (calendar client failed to load)")

    logger.info("[4/4] Starting Telegram bot")
    try:
        await telegram_client.start(robot.handle_update)

        logger.info("=" * 60)
        logger.info("✓ SYSTEM READY - Bot is now listening for messages")
        logger.info("=" * 60)
        logger.info("Press Ctrl+C to stop")

        while True:
            await asyncio.sleep(1)

    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutdown initiated")
    finally:
        logger.info("Stopping Telegram client...")
        await telegram_client.stop()
        logger.info("✓ Hangout Bot shutdown complete")


def run():
    """Console script entry point: hangout-bot [config.yaml] [-v|-vv|-vvv]."""
    setup_logging(verbosity=parse_verbosity(sys.argv))

    args = [arg for arg in sys.argv[1:] if arg not in VERBOSITY_FLAGS]
    config_path = args[0] if args else "config.yaml"

    try:
        asyncio.run(main(config_path))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()

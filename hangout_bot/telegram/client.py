"""Telegram client for sending and receiving messages."""

import logging
from typing import Awaitable, Callable, Optional

from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, MessageHandler, filters

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4096

UpdateHandler = Callable[[Update], Awaitable[None]]


class TelegramClient:
    """Client for Telegram bot operations."""

    def __init__(
        self,
        bot_token: str,
        mode: str = "poll",
        webhook_url: Optional[str] = None,
        poll_interval: float = 1.0,
        webhook_port: int = 8000,
    ):
        """
        Initialize Telegram client.

        Args:
            bot_token: Telegram bot token
            mode: "poll" or "webhook"
            webhook_url: Webhook URL (required for webhook mode)
            poll_interval: Polling interval in seconds (for poll mode)
            webhook_port: Port for webhook server (for webhook mode)
        """
        self.bot_token = bot_token
        self.mode = mode
        self.webhook_url = webhook_url
        self.poll_interval = poll_interval
        self.webhook_port = webhook_port
        self.bot = Bot(token=bot_token)
        self.application: Optional[Application] = None
        self.update_handler: Optional[UpdateHandler] = None

    def _build_application(self, update_handler: UpdateHandler) -> Application:
        """Application routing every text message to update_handler."""
        self.update_handler = update_handler
        # Mentions are independent, so overlapping updates are not serialized
        application = (
            Application.builder()
            .token(self.bot_token)
            .concurrent_updates(True)
            .build()
        )
        application.add_handler(MessageHandler(filters.TEXT, self._handle_update))
        return application

    async def start(self, update_handler: UpdateHandler) -> None:
        """
        Start receiving updates in the configured mode.

        Args:
            update_handler: Async function(update: Update) -> None
        """
        if self.mode == "poll":
            await self.start_polling(update_handler)
        elif self.mode == "webhook":
            await self.start_webhook(update_handler)
        else:
            raise ValueError(f"Unknown mode: {self.mode}")

    async def start_polling(self, update_handler: UpdateHandler) -> None:
        """Start polling for updates."""
        if self.mode != "poll":
            raise ValueError("Client is not configured for poll mode")

        self.application = self._build_application(update_handler)
        await self.application.initialize()
        await self.application.start()

        logger.info("Clearing any existing webhook before polling")
        await self.application.bot.delete_webhook(drop_pending_updates=True)

        await self.application.updater.start_polling(
            poll_interval=self.poll_interval
        )

    async def start_webhook(self, update_handler: UpdateHandler) -> None:
        """Start the webhook server."""
        if self.mode != "webhook":
            raise ValueError("Client is not configured for webhook mode")

        if not self.webhook_url:
            raise ValueError("webhook_url is required for webhook mode")

        self.application = self._build_application(update_handler)
        await self.application.initialize()
        await self.application.start()

        await self.application.updater.start_webhook(
            listen="0.0.0.0",
            port=self.webhook_port,
            webhook_url=self.webhook_url,
        )

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: Optional[int] = None,
    ) -> None:
        """
        Send a plain text message, split into chunks Telegram accepts.

        Args:
            chat_id: Telegram chat ID
            text: Message text
            reply_to_message_id: Message to reply to (first chunk only)

        Raises:
            TelegramError: If message sending fails
        """
        chunks = [
            text[i : i + MAX_MESSAGE_LENGTH]
            for i in range(0, len(text), MAX_MESSAGE_LENGTH)
        ] or [text]

        try:
            for index, chunk in enumerate(chunks):
                await self.bot.send_message(
                    chat_id=chat_id,
                    text=chunk,
                    reply_to_message_id=reply_to_message_id if index == 0 else None,
                )
        except TelegramError as e:
            raise TelegramError(f"Failed to send message: {str(e)}")

    async def stop(self) -> None:
        """Stop receiving updates and shut the application down."""
        if not self.application:
            return

        if self.application.updater and self.application.updater.running:
            await self.application.updater.stop()
        if self.mode == "webhook":
            await self.application.bot.delete_webhook()
        await self.application.stop()
        await self.application.shutdown()

    async def _handle_update(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Forward an update to the registered handler."""
        await self.update_handler(update)

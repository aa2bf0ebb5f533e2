"""Robot implementation on top of python-telegram-bot."""

import logging
import re
from typing import Any

from telegram import Update

from ..robot.base import Response, Robot
from .client import TelegramClient
from .message_extractor import ExtractedMessage, MessageExtractor

logger = logging.getLogger(__name__)

HELP_PATTERN = re.compile(r"^(help|start)\s*$")


class TelegramResponse(Response):
    """Response that answers in the Telegram chat the mention came from."""

    def __init__(
        self,
        match: re.Match,
        message: ExtractedMessage,
        client: TelegramClient,
    ):
        super().__init__(match, message.user_name)
        self.message = message
        self.client = client

    async def say(self, text: str) -> None:
        await self.client.send_message(self.message.chat_id, text)

    async def error(self, text: str) -> None:
        await self.client.send_message(
            self.message.chat_id,
            text,
            reply_to_message_id=self.message.message_id,
        )


class TelegramRobot(Robot):
    """Routes Telegram mentions to plugin listeners."""

    def __init__(self, client: TelegramClient, extractor: MessageExtractor):
        """
        Initialize the robot with a built-in help command.

        Args:
            client: Telegram client used for replies
            extractor: Message extractor for mention detection
        """
        super().__init__()
        self.client = client
        self.extractor = extractor
        self.on_mention(HELP_PATTERN, self.reply_help)

    def build_response(self, match: re.Match, message: Any) -> Response:
        return TelegramResponse(match, message, self.client)

    def help_text(self) -> str:
        """All help entries, one per line."""
        entries = self.get_help()
        if not entries:
            return "I don't know any commands yet."
        return "\n".join(entry.format() for entry in entries)

    async def reply_help(self, response: Response) -> None:
        await response.say(self.help_text())

    async def handle_update(self, update: Update) -> None:
        """Handle an incoming Telegram update."""
        await self.handle_update_dict(update.to_dict())

    async def handle_update_dict(self, update: dict) -> None:
        """
        Dispatch a Telegram update dictionary to matching listeners.

        Args:
            update: Update as returned by Update.to_dict()
        """
        extracted = self.extractor.extract(update)
        if not extracted:
            return

        if not extracted.is_mentioned:
            logger.debug(f"Message in chat {extracted.chat_id} does not mention bot, ignoring")
            return

        logger.info(
            f"Mention from {extracted.user_name} ({extracted.user_id}) in chat {extracted.chat_id}"
        )

        matched = await self.dispatch_mention(extracted.command_text, extracted)
        if not matched:
            logger.debug(f"No listener matched {extracted.command_text!r}")

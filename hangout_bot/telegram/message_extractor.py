"""Message extraction and mention detection for Telegram updates."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.config_schema import AppConfig

logger = logging.getLogger(__name__)


@dataclass
class ExtractedMessage:
    """Extracted and validated message from Telegram."""

    chat_id: int
    user_id: int
    message_text: str
    command_text: str
    user_name: str
    message_id: Optional[int] = None
    is_mentioned: bool = False


class MessageExtractor:
    """Extracts messages addressed to the bot from Telegram updates."""

    def __init__(self, config: AppConfig):
        """
        Initialize message extractor.

        Args:
            config: Application configuration
        """
        self.config = config
        self.allowed_chat_ids = {
            conv.chat_id for conv in config.allowed_conversations
        }
        self.allowed_user_ids = {user.user_id for user in config.allowed_users}
        self.bot_username: Optional[str] = None

    def set_bot_username(self, username: str) -> None:
        """
        Set bot username for mention detection.

        Args:
            username: Bot username (with or without @ prefix)
        """
        self.bot_username = username.lower().lstrip("@")
        logger.info(f"Bot username set to: @{self.bot_username}")

    @staticmethod
    def _utf16_index(text: str, offset: int) -> int:
        """Convert a Telegram entity offset (UTF-16 code units) to a str index."""
        return len(text.encode("utf-16-le")[: offset * 2].decode("utf-16-le", errors="ignore"))

    def _mention_spans(self, message: dict) -> list:
        """(start, end) str indexes of every @mention entity naming this bot."""
        if not self.bot_username:
            return []

        text = message.get("text", "")
        spans = []
        for entity in message.get("entities", []):
            if entity.get("type") != "mention":
                continue
            offset = entity.get("offset", 0)
            start = self._utf16_index(text, offset)
            end = self._utf16_index(text, offset + entity.get("length", 0))
            mentioned = text[start:end].lstrip("@").lower()
            if mentioned == self.bot_username:
                spans.append((start, end))
        return spans

    def _command_target(self, text: str) -> Optional[str]:
        """Bot named in a /command@bot suffix, if any."""
        command = text[1:].split(maxsplit=1)[0] if len(text) > 1 else ""
        if "@" in command:
            return command.split("@", 1)[1].lower()
        return None

    def is_bot_mentioned(self, message: dict) -> bool:
        """
        Check if a message is addressed to the bot.

        A message is addressed to the bot when it @mentions the bot or is a
        /command not aimed at another bot. With require_mention disabled
        every message counts.

        Args:
            message: Message dictionary from Telegram update

        Returns:
            True if the bot should treat the message as a mention
        """
        if not self.config.telegram.require_mention:
            return True

        if not self.bot_username:
            logger.warning("Bot username not set, treating as mentioned")
            return True

        text = message.get("text", "")
        if text.startswith("/"):
            target = self._command_target(text)
            return target is None or target == self.bot_username

        return bool(self._mention_spans(message))

    def command_text(self, message: dict) -> str:
        """
        Message text with the bot address removed.

        "@bot hangout me Standup" and "/hangout@bot me Standup" both become
        "hangout me Standup".
        """
        text = message.get("text", "")

        if text.startswith("/"):
            first, _, rest = text[1:].partition(" ")
            command = first.split("@", 1)[0]
            return f"{command} {rest}".strip()

        for start, end in sorted(self._mention_spans(message), reverse=True):
            text = text[:start] + text[end:]
        return text.strip()

    @staticmethod
    def display_name(from_user: dict) -> str:
        """Human-readable name of the sender."""
        parts = [from_user.get("first_name"), from_user.get("last_name")]
        name = " ".join(part for part in parts if part)
        return name or from_user.get("username") or str(from_user.get("id", ""))

    def extract(self, update: dict) -> Optional[ExtractedMessage]:
        """
        Extract message from Telegram update.

        Args:
            update: Telegram update dictionary

        Returns:
            ExtractedMessage if valid, None otherwise
        """
        if "message" not in update:
            return None

        message = update["message"]
        chat = message.get("chat", {})
        from_user = message.get("from", {})

        chat_id = chat.get("id")
        user_id = from_user.get("id")
        message_text = message.get("text", "")

        if not message_text or not chat_id or not user_id:
            return None

        if not self.is_allowed_conversation(chat_id):
            logger.debug(f"Ignoring message from chat {chat_id} (not allowed)")
            return None

        if not self.is_allowed_user(user_id):
            logger.debug(f"Ignoring message from user {user_id} (not allowed)")
            return None

        return ExtractedMessage(
            chat_id=chat_id,
            user_id=user_id,
            message_text=message_text,
            command_text=self.command_text(message),
            user_name=self.display_name(from_user),
            message_id=message.get("message_id"),
            is_mentioned=self.is_bot_mentioned(message),
        )

    def is_allowed_conversation(self, chat_id: int) -> bool:
        """Check if conversation ID is allowed (no restrictions allows all)."""
        if not self.allowed_chat_ids:
            return True

        return chat_id in self.allowed_chat_ids

    def is_allowed_user(self, user_id: int) -> bool:
        """Check if user ID is allowed (no restrictions allows all)."""
        if not self.allowed_user_ids:
            return True

        return user_id in self.allowed_user_ids

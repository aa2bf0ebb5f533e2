"""Telegram integration module."""

from .client import TelegramClient
from .message_extractor import MessageExtractor, ExtractedMessage
from .robot import TelegramRobot, TelegramResponse

__all__ = [
    "TelegramClient",
    "MessageExtractor",
    "ExtractedMessage",
    "TelegramRobot",
    "TelegramResponse",
]

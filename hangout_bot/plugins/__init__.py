"""Bot plugins."""

from .base import BasePlugin
from .hangouts import HangoutPlugin

__all__ = ["BasePlugin", "HangoutPlugin"]

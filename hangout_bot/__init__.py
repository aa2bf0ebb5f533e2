"""Telegram bot that starts Google Calendar hangouts on request."""

__version__ = "0.1.0"

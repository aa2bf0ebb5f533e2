"""Chat robot capabilities used by plugins."""

from .base import HelpEntry, Listener, Response, Robot

__all__ = ["HelpEntry", "Listener", "Response", "Robot"]

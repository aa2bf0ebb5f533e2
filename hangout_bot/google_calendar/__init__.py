"""Google Calendar access for the hangout plugin."""

from .client import CalendarClient, load_client
from .events import build_event_body, create_event

__all__ = ["CalendarClient", "load_client", "build_event_body", "create_event"]

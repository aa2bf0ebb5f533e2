"""Calendar event creation."""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..config.config_schema import HangoutsConfig
from .client import CalendarClient

logger = logging.getLogger(__name__)

SUMMARY_PREFIX = "Google Hangout: "
REMINDER_METHOD = "popup"
REMINDER_MINUTES = 0


def format_instant(dt: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 instant, e.g. 2024-01-01T10:00:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_event_body(
    summary: str,
    description: str,
    duration_ms: int,
    now: datetime,
    create_conference: bool = False,
) -> Dict[str, Any]:
    """
    Build the events.insert request body.

    Args:
        summary: Event title (prefixed with "Google Hangout: ")
        description: Event description
        duration_ms: Event length in milliseconds
        now: Start of the event
        create_conference: Ask for a Meet conference to be attached

    Returns:
        Event resource dictionary
    """
    end = now + timedelta(milliseconds=duration_ms)

    body: Dict[str, Any] = {
        "summary": SUMMARY_PREFIX + summary,
        "description": description,
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": REMINDER_METHOD, "minutes": REMINDER_MINUTES},
            ],
        },
        "start": {"dateTime": format_instant(now)},
        "end": {"dateTime": format_instant(end)},
    }

    if create_conference:
        body["conferenceData"] = {
            "createRequest": {
                "requestId": uuid.uuid4().hex,
                "conferenceSolutionKey": {"type": "hangoutsMeet"},
            }
        }

    return body


async def create_event(
    client: CalendarClient,
    summary: str,
    description: str,
    config: HangoutsConfig,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Insert a hangout event into the configured calendar.

    Errors from the API (HttpError, RefreshError, transport errors) are
    not caught here.

    Args:
        client: Authenticated calendar client
        summary: Event title
        description: Event description
        config: Hangout plugin configuration
        now: Event start, defaults to the current time

    Returns:
        Event resource returned by the API
    """
    if now is None:
        now = datetime.now(timezone.utc)

    body = build_event_body(
        summary,
        description,
        config.duration,
        now,
        create_conference=config.create_conference,
    )

    params: Dict[str, Any] = {"calendarId": config.id, "body": body}
    if config.create_conference:
        params["conferenceDataVersion"] = 1

    request = client.service.events().insert(**params)

    logger.debug(f"Inserting event {body['summary']!r} into calendar {config.id}")
    event = await asyncio.to_thread(request.execute, http=client.authorized_http())
    logger.info(f"Created calendar event {event.get('id')}")

    return event

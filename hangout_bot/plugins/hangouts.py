"""Hangout plugin: creates a calendar event on "hangout me <title>"."""

import logging
import re
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlsplit, urlunsplit

from ..config.config_schema import HangoutsConfig
from ..google_calendar.client import CalendarClient, load_client
from ..google_calendar.events import create_event
from ..robot.base import Response, Robot
from .base import BasePlugin

logger = logging.getLogger(__name__)

HANGOUT_PATTERN = re.compile(r"^hangout( me)?\s*(.+)?")
HELP_USAGE = "hangout me <title>"
HELP_DESCRIPTION = "create a google calendar event named <title>"

DEFAULT_TITLE = "Hangout"
FAILURE_MESSAGE = "I'm sorry. Something went wrong and I wasn't able to create a hangout :("
SUCCESS_TEMPLATE = "\n".join(
    [
        "I've started a hangout titled '{title}'",
        "Primary account: {link}",
        "Secondary account: {secondary}",
    ]
)


def secondary_account_link(link: str) -> str:
    """Same link opened as the browser's second signed-in Google account."""
    parts = urlsplit(link)
    query = f"{parts.query}&authuser=1" if parts.query else "authuser=1"
    return urlunsplit(parts._replace(query=query))


def format_success(title: str, link: str) -> str:
    """Three-line reply announcing the hangout with both account links."""
    return SUCCESS_TEMPLATE.format(
        title=title, link=link, secondary=secondary_account_link(link)
    )


def event_link(event: Dict[str, Any]) -> Optional[str]:
    """Hangout link of a created event, falling back to its calendar page."""
    link = event.get("hangoutLink")
    if not link:
        logger.warning(
            f"Event {event.get('id')} has no hangoutLink, replying with htmlLink"
        )
        link = event.get("htmlLink")
    return link


class HangoutPlugin(BasePlugin):
    """Starts a hangout by creating a Google Calendar event."""

    def __init__(self, config: Union[HangoutsConfig, Dict[str, Any], None]):
        """
        Initialize the plugin.

        Args:
            config: HangoutsConfig or a mapping of its options

        Raises:
            ValueError: If key, secret or refresh is missing
        """
        super().__init__(
            name="hangouts",
            description="Create a Google Calendar event and reply with its hangout link",
        )
        if not isinstance(config, HangoutsConfig):
            config = HangoutsConfig(**(config or {}))
        self.config = config
        self.client: Optional[CalendarClient] = None
        self._load_attempted = False
        self._robots: List[Robot] = []

    async def register(self, robot: Robot) -> bool:
        """
        Load the calendar client, then listen for hangout mentions.

        The client is loaded once. If loading fails the command is never
        registered and stays unavailable for the life of the process.
        Registering again with the same robot is a no-op.
        """
        if any(registered is robot for registered in self._robots):
            return self.client is not None

        robot.help(HELP_USAGE, HELP_DESCRIPTION)
        self._robots.append(robot)

        if not self._load_attempted:
            self._load_attempted = True
            try:
                self.client = await load_client(self.config)
            except Exception as e:
                logger.warning(f"Hangout command disabled, calendar client unavailable: {e}")

        if self.client is None:
            return False

        robot.on_mention(HANGOUT_PATTERN, self.handle_hangout)
        return True

    async def handle_hangout(self, response: Response) -> None:
        """Create the event for one mention and report the outcome."""
        summary = response[2] or DEFAULT_TITLE
        description = f"Requested by {response.user_name}"

        logger.info(f"Hangout '{summary}' requested by {response.user_name}")

        try:
            event = await create_event(self.client, summary, description, self.config)
        except Exception as e:
            logger.error(f"Failed to create hangout '{summary}': {e}", exc_info=True)
            await response.error(FAILURE_MESSAGE)
            return

        link = event_link(event)
        if not link:
            logger.error(f"Event {event.get('id')} for hangout '{summary}' has no link to share")
            await response.error(FAILURE_MESSAGE)
            return

        await response.say(format_success(summary, link))

"""Abstract chat robot interface.

Plugins only see this module: they add help entries, listen for mentions
matching a pattern and answer through a Response. Chat adapters (see
``hangout_bot.telegram``) supply the concrete Robot and Response.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Pattern, Union

logger = logging.getLogger(__name__)


class Response(ABC):
    """A matched mention, with ways to answer in the same chat."""

    def __init__(self, match: re.Match, user_name: str):
        """
        Initialize response.

        Args:
            match: Regex match of the listener pattern against the mention text
            user_name: Display name of the user who sent the mention
        """
        self.match = match
        self.user_name = user_name

    def __getitem__(self, group: int) -> Optional[str]:
        """Return a capture group of the match (None when it did not participate)."""
        return self.match.group(group)

    @abstractmethod
    async def say(self, text: str) -> None:
        """Send a message to the chat."""
        pass

    @abstractmethod
    async def error(self, text: str) -> None:
        """Send an error message to the chat."""
        pass


MentionHandler = Callable[[Response], Awaitable[None]]


@dataclass
class HelpEntry:
    """One line of the robot's help output."""

    usage: str
    description: str

    def format(self) -> str:
        return f"{self.usage} - {self.description}"


@dataclass
class Listener:
    """Mention pattern bound to its handler."""

    pattern: Pattern[str]
    handler: MentionHandler


class Robot(ABC):
    """Abstract chat robot."""

    def __init__(self):
        """Initialize with no help entries and no listeners."""
        self._help: List[HelpEntry] = []
        self._listeners: List[Listener] = []

    def help(self, usage: str, description: str) -> None:
        """
        Add a help entry.

        Args:
            usage: Command usage, e.g. "hangout me <title>"
            description: What the command does
        """
        self._help.append(HelpEntry(usage=usage, description=description))

    def on_mention(
        self, pattern: Union[str, Pattern[str]], handler: MentionHandler
    ) -> None:
        """
        Call handler for every mention whose text matches pattern.

        Args:
            pattern: Regex (string or compiled), searched case-sensitively
            handler: Async function(response: Response) -> None
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        self._listeners.append(Listener(pattern=pattern, handler=handler))
        logger.debug(f"Listening for mentions matching {pattern.pattern!r}")

    def get_help(self) -> List[HelpEntry]:
        """Get all help entries in registration order."""
        return list(self._help)

    def get_listeners(self) -> List[Listener]:
        """Get all mention listeners in registration order."""
        return list(self._listeners)

    async def dispatch_mention(self, text: str, message: Any) -> int:
        """
        Run every listener matching the mention text.

        A failing handler is logged and does not stop the others.

        Args:
            text: Mention text with the bot mention removed
            message: Adapter-specific message passed to build_response

        Returns:
            Number of listeners that matched
        """
        matched = 0
        for listener in self.get_listeners():
            match = listener.pattern.search(text)
            if not match:
                continue

            matched += 1
            response = self.build_response(match, message)
            try:
                await listener.handler(response)
            except Exception as e:
                logger.error(
                    f"Listener {listener.pattern.pattern!r} failed: {e}", exc_info=True
                )

        return matched

    @abstractmethod
    def build_response(self, match: re.Match, message: Any) -> Response:
        """
        Create the Response handed to a listener.

        Args:
            match: Listener pattern match
            message: Adapter-specific message

        Returns:
            Response bound to the message's chat
        """
        pass

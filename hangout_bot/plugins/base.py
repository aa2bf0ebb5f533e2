"""Base plugin interface."""

from abc import ABC, abstractmethod

from ..robot.base import Robot


class BasePlugin(ABC):
    """Abstract base class for all plugins."""

    def __init__(self, name: str, description: str):
        """
        Initialize plugin.

        Args:
            name: Plugin name
            description: Plugin description
        """
        self.name = name
        self.description = description

    @abstractmethod
    async def register(self, robot: Robot) -> bool:
        """
        Attach the plugin's help entries and listeners to a robot.

        Args:
            robot: Robot to register with

        Returns:
            True if the plugin's commands are now reachable
        """
        pass

    def get_name(self) -> str:
        """Get plugin name."""
        return self.name

    def get_description(self) -> str:
        """Get plugin description."""
        return self.description

"""Load bot configuration from YAML."""

import yaml
from pathlib import Path
from typing import Any, Dict

from .config_schema import AppConfig


class ConfigLoader:
    """Read a YAML configuration file into a validated AppConfig."""

    @staticmethod
    def read_yaml(path: str) -> Dict[str, Any]:
        """
        Read the raw configuration mapping.

        Args:
            path: Path to configuration file

        Returns:
            Parsed YAML mapping

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file is empty or not a mapping
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)

        if not config_dict:
            raise ValueError("Configuration file is empty")
        if not isinstance(config_dict, dict):
            raise ValueError("Configuration file must contain a mapping")

        return config_dict

    @staticmethod
    def load_config(path: str = "config.yaml") -> AppConfig:
        """
        Load and validate the configuration file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid (pydantic's ValidationError included)
        """
        config = AppConfig(**ConfigLoader.read_yaml(path))
        config.validate()
        return config


def load_config(path: str = "config.yaml") -> AppConfig:
    """Shortcut for ConfigLoader.load_config."""
    return ConfigLoader.load_config(path)

"""Configuration management for the portfolio rebalancer.

This module provides simple YAML configuration loading and access.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from rebalancer.utils.exceptions import ConfigurationError

CONFIG_ENV_VAR = "REBALANCER_CONFIG"

ROOT_DIR = Path(__file__).parent.parent.parent


class Config:
    """Simple configuration loader and accessor.

    Loads YAML configuration files and provides dict-like access to settings.

    Example:
        >>> config = Config.from_file("config/default.yaml")
        >>> clamp = config.get("rebalance.clamp_sells", False)
    """

    def __init__(self, config_dict: dict[str, Any]) -> None:
        """Initialize with configuration dictionary.

        Args:
            config_dict: Configuration data as nested dictionary
        """
        self._config = config_dict

    @classmethod
    def from_file(cls, filepath: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            filepath: Path to YAML configuration file

        Returns:
            Config instance with loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the document is not a mapping
            yaml.YAMLError: If YAML parsing fails
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)

        if config_dict is None:
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {filepath}"
            )

        return cls(config_dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Supports nested keys using dot notation (e.g., "logging.level").

        Args:
            key: Configuration key (supports dot notation for nested keys)
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get("logging.level")
            'INFO'
            >>> config.get("missing.key", "fallback")
            'fallback'
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using bracket notation.

        Raises:
            KeyError: If key not found
        """
        value = self.get(key)
        if value is None:
            raise KeyError(f"Configuration key not found: {key}")
        return value

    def to_dict(self) -> dict[str, Any]:
        """Get the full configuration as dictionary."""
        return self._config.copy()


def load_config(filepath: str | Path = None) -> Config:
    """Helper function to load configuration.

    Resolution order: explicit ``filepath``, then the ``REBALANCER_CONFIG``
    environment variable (a project-root ``.env`` file is loaded first when
    present), then ``config/default.yaml``. When the default file is absent
    (e.g. a non-editable install) an empty configuration is returned.

    Args:
        filepath: Path to YAML configuration file. If None, uses the
            environment or the default path.

    Returns:
        Config instance
    """
    if filepath is None:
        env_file = ROOT_DIR / ".env"
        if env_file.exists():
            load_dotenv(env_file)
        filepath = os.getenv(CONFIG_ENV_VAR)
        if filepath is None:
            default_path = ROOT_DIR / "config" / "default.yaml"
            if not default_path.exists():
                return Config({})
            filepath = default_path
    return Config.from_file(filepath)


def get_clamp_sells(config: Config) -> bool:
    """Read the oversell clamping policy from configuration.

    Args:
        config: Loaded configuration

    Returns:
        Value of ``rebalance.clamp_sells`` (False when absent)

    Raises:
        ConfigurationError: If the value is not a boolean
    """
    value = config.get("rebalance.clamp_sells", False)
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"rebalance.clamp_sells must be a boolean, got {value!r}"
        )
    return value

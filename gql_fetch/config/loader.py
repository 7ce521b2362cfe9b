"""
Configuration loader for gql_fetch.

This module builds a ClientConfig from an optional JSON file and
``GQL_FETCH_*`` environment variables, environment values winning.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .models import ClientConfig


class ConfigLoader:
    """Configuration loader with support for file and environment sources."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            environ: Environment mapping to read (defaults to ``os.environ``)
        """
        self.config_paths = [
            Path("gql_fetch.json"),
            Path("config/gql_fetch.json"),
            Path.home() / ".gql_fetch" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "GQL_FETCH_"
        self.environ = environ if environ is not None else os.environ

        # Settings passed through without type conversion
        self.string_fields = {
            ("endpoint",),
            ("transport", "user_agent"),
            ("logging", "level"),
            ("logging", "file_path"),
        }

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> ClientConfig:
        """
        Load configuration from all available sources.

        Args:
            config_file: Specific config file to load

        Returns:
            ClientConfig with merged configuration

        Raises:
            ValueError: If no endpoint is configured or a file cannot be parsed
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        if "endpoint" not in config_data:
            raise ValueError(
                f"No endpoint configured; set {self.env_prefix}ENDPOINT or add "
                "'endpoint' to a config file"
            )

        return ClientConfig(**config_data)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                return self._parse_config_file(config_path)
        else:
            for config_path in self.config_paths:
                if config_path.exists():
                    return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse a JSON configuration file."""
        if config_path.suffix.lower() != ".json":
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f) or {}
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            f"{self.env_prefix}ENDPOINT": ("endpoint",),
            # Transport
            f"{self.env_prefix}TIMEOUT": ("transport", "timeout"),
            f"{self.env_prefix}CONNECT_TIMEOUT": ("transport", "connect_timeout"),
            f"{self.env_prefix}VERIFY_SSL": ("transport", "verify_ssl"),
            f"{self.env_prefix}USER_AGENT": ("transport", "user_agent"),
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
        }

        for env_var, path in env_mappings.items():
            value = self.environ.get(env_var)
            if value is None:
                continue

            target = config
            for key in path[:-1]:
                target = target.setdefault(key, {})
            if path in self.string_fields:
                target[path[-1]] = value
            else:
                target[path[-1]] = self._convert_env_value(value)

            if path == ("logging", "file_path"):
                config["logging"]["enable_file"] = True

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ("true", "yes", "1", "on"):
            return True
        if value.lower() in ("false", "no", "0", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

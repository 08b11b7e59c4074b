"""Configuration loader for movetree.

Loads the packaged config.json defaults and merges an optional user
configuration file over them.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from movetree.utils.path_resolver import get_package_resource_path


class ConfigLoader:
    """Loads and validates movetree configuration.

    The packaged config.json holds every setting with its default value.
    A user file only needs to contain the keys it overrides; nested
    dictionaries are merged key by key.
    """

    DEFAULT_CONFIG_PATH = "config/config.json"
    REQUIRED_SECTIONS = ("logging", "render", "engine")

    def __init__(self, user_config_path: Optional[Union[str, Path]] = None) -> None:
        """Initialize the loader.

        Args:
            user_config_path: Optional path to a JSON file with overrides.
        """
        self.default_config_path = get_package_resource_path(self.DEFAULT_CONFIG_PATH)
        self.user_config_path = Path(user_config_path) if user_config_path else None

    def load(self) -> Dict[str, Any]:
        """Load configuration with strict validation.

        Returns:
            Merged configuration dictionary.

        Raises:
            FileNotFoundError: If the defaults or the given user file do not exist.
            ValueError: If a file is not valid JSON or a required section is missing.
        """
        config = self._read_json(self.default_config_path)

        if self.user_config_path is not None:
            overrides = self._read_json(self.user_config_path)
            config = self._merge(config, overrides)

        self._validate(config)
        return config

    def _read_json(self, path: Path) -> Dict[str, Any]:
        """Read a JSON object from a file.

        Args:
            path: Path to the JSON file.

        Returns:
            Parsed dictionary.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        return data

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge overrides into a copy of base."""
        merged = copy.deepcopy(base)
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigLoader._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _validate(self, config: Dict[str, Any]) -> None:
        """Check that every required section is present and is a dictionary."""
        for section in self.REQUIRED_SECTIONS:
            if section not in config:
                raise ValueError(f"Missing required configuration section: '{section}'")
            if not isinstance(config[section], dict):
                raise ValueError(f"Configuration section '{section}' must be an object")

"""
Configuration manager for GPS track filtering.
"""

import copy
import json
import logging
import os
from typing import Dict, Any, List, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the GPS filter."""

    DEFAULT_CONFIG = {
        # Filter parameters
        "noise": 1.0,
        "seconds_per_observation": 1.0,
        "skip_singular": False,

        # Logging
        "log_level": "WARNING",
        "log_file": None,

        # Output configuration
        "output": {
            "precision": 6,
            "fields": ["lat", "lon", "bearing", "mph"]
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to a JSON configuration file. Missing files
                leave the defaults in place.
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        # Load configuration from file if it exists
        if config_file is not None:
            if os.path.exists(config_file):
                self.load_config()
            else:
                logger.info("Config file %s not found, using defaults", config_file)

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully

        Raises:
            ConfigError: File is unreadable or not a JSON object
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to load config {self.config_file}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config {self.config_file} must hold a JSON object")

        # Merge with defaults (file config overrides defaults)
        self._merge_config(self.config, file_config)

        logger.info("Configuration loaded from %s", self.config_file)
        return True

    def save_config(self, config_file: Optional[str] = None) -> bool:
        """
        Save current configuration to file.

        Args:
            config_file: Destination (defaults to the file it was loaded from)

        Returns:
            True if saved successfully
        """
        path = config_file or self.config_file
        if path is None:
            raise ConfigError("No config file given")

        try:
            with open(path, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save config {path}: {e}") from e

        logger.info("Configuration saved to %s", path)
        return True

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default=None):
        """Get configuration value with optional default."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    # Property accessors for common configuration values
    @property
    def noise(self) -> float:
        return float(self.config["noise"])

    @property
    def seconds_per_observation(self) -> float:
        return float(self.config["seconds_per_observation"])

    @property
    def skip_singular(self) -> bool:
        return bool(self.config["skip_singular"])

    @property
    def log_level(self) -> str:
        return self.config["log_level"]

    @property
    def log_file(self) -> Optional[str]:
        return self.config["log_file"]

    @property
    def precision(self) -> int:
        return int(self.get("output.precision", 6))

    @property
    def output_fields(self) -> List[str]:
        return list(self.get("output.fields", []))

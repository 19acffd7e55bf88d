"""
Configuration manager for the rate of turn system.
"""

import copy
import json
import logging
import os
from typing import Dict, Any, Optional

from core.math.constants import DEFAULT_WINDOW_SIZE, INPUT_PATHS, PATH_HEADING_TRUE

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for the rate of turn system."""

    DEFAULT_CONFIG = {
        # Estimation
        "input_path": PATH_HEADING_TRUE,
        "window_size": DEFAULT_WINDOW_SIZE,

        # NMEA source
        "nmea_serial_port": "/dev/ttyUSB0",
        "nmea_baud_rate": 4800,
        "replay_interval_s": 0.1,

        # Data logging
        "enable_logging": True,
        "log_file": "rot_estimator.log",
        "log_level": "INFO",
        "csv_log_file": None,

        # Output configuration
        "status_interval_s": 5.0
    }

    def __init__(self, config_file: str = "config.json", create_if_missing: bool = True):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file
            create_if_missing: Write the defaults when the file does not exist
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        # Load configuration from file if it exists
        if os.path.exists(config_file):
            self.load_config()
        else:
            logger.info("Config file %s not found, using defaults", config_file)
            if create_if_missing:
                self.save_config()  # Create default config file

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to load config %s: %s", self.config_file, e)
            return False

        # Merge with defaults (file config overrides defaults)
        self._merge_config(self.config, file_config)

        logger.info("Configuration loaded from %s", self.config_file)
        return True

    def save_config(self) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if saved successfully
        """
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Failed to save config %s: %s", self.config_file, e)
            return False

        logger.info("Configuration saved to %s", self.config_file)
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

    def validate(self):
        """
        Check the estimation settings.

        Raises:
            ValueError: unknown input path or invalid window size
        """
        if self.input_path not in INPUT_PATHS:
            raise ValueError(f"input_path must be one of {INPUT_PATHS}, got {self.input_path!r}")

        size = self.config["window_size"]
        if isinstance(size, bool) or not isinstance(size, int):
            raise ValueError(f"window_size must be an integer, got {size!r}")
        if size < 0:
            raise ValueError(f"window_size must be non-negative, got {size}")

    # Property accessors for common configuration values
    @property
    def input_path(self) -> str:
        return self.config["input_path"]

    @property
    def window_size(self) -> int:
        return self.config["window_size"]

    @property
    def nmea_serial_port(self) -> str:
        return self.config["nmea_serial_port"]

    @property
    def nmea_baud_rate(self) -> int:
        return self.config["nmea_baud_rate"]

    @property
    def replay_interval_s(self) -> float:
        return self.config["replay_interval_s"]

    @property
    def enable_logging(self) -> bool:
        return self.config["enable_logging"]

    @property
    def log_file(self) -> Optional[str]:
        return self.config["log_file"]

    @property
    def log_level(self) -> str:
        return self.config["log_level"]

    @property
    def csv_log_file(self) -> Optional[str]:
        return self.config["csv_log_file"]

    @property
    def status_interval_s(self) -> float:
        return self.config["status_interval_s"]

    @property
    def plugin_settings(self) -> Dict[str, Any]:
        """Settings in the plugin's schema layout."""
        return {
            "inputPath": self.input_path,
            "size": self.window_size
        }

    def print_config(self):
        """Print current configuration."""
        print("=== Rate of Turn Configuration ===")
        print(json.dumps(self.config, indent=2))

"""
Configuration management for the transaction inspector.

This module provides configuration file support, allowing users to set the
default output format, display network, strictness and logging options via
a configuration file or environment variables.
"""

import configparser
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "TXINSPECTOR_"


class InspectorConfig:
    """Inspector configuration manager"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.txinspector/txinspector.conf)
        """
        if config_path is None:
            config_dir = Path.home() / ".txinspector"
            config_path = config_dir / "txinspector.conf"

        self.config_path = Path(config_path)
        self.config = configparser.ConfigParser()

        # Default values
        self.defaults = {
            'network': 'mainnet',
            'output': 'pretty',
            'compact': '0',
            'rawscripts': '0',
            'strict': '0',
            'debug': '0',
            'logtimestamps': '1',
        }

        # Load config if exists
        if self.config_path.exists():
            try:
                self.config.read(self.config_path)
            except configparser.Error as e:
                logger.warning(f"Error reading config file {self.config_path}: {e}")

    def get(self, key: str, section: str = 'DEFAULT') -> Optional[str]:
        """
        Get config value.

        Priority order:
        1. Environment variable (TXINSPECTOR_<KEY>)
        2. Config file value (given section, then any section)
        3. Default value

        Args:
            key: Config key
            section: Config section (default: 'DEFAULT')

        Returns:
            Config value or default
        """
        env_value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if env_value:
            return env_value

        if self.config.has_option(section, key):
            return self.config.get(section, key)
        for name in self.config.sections():
            if self.config.has_option(name, key):
                return self.config.get(name, key)

        return self.defaults.get(key)

    def getint(self, key: str, section: str = 'DEFAULT') -> int:
        """Get config value as integer (0 if missing or malformed)."""
        value = self.get(key, section)
        if value is None:
            return 0
        try:
            return int(value)
        except ValueError:
            return 0

    def getboolean(self, key: str, section: str = 'DEFAULT') -> bool:
        """Get config value as boolean."""
        value = self.get(key, section)
        if value is None:
            return False
        return value.lower() in ('1', 'true', 'yes', 'on')

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert config to dictionary.

        Returns:
            Dictionary with all configuration values
        """
        return {
            'network': self.get('network'),
            'output': self.get('output'),
            'compact': self.getboolean('compact'),
            'raw_scripts': self.getboolean('rawscripts'),
            'strict': self.getboolean('strict'),
            'debug': self.getboolean('debug'),
            'log_timestamps': self.getboolean('logtimestamps'),
        }


def setup_logging(debug: bool = False, log_timestamps: bool = True) -> None:
    """Send log records to stderr at DEBUG or WARNING level."""
    fmt = "%(levelname)s %(name)s: %(message)s"
    if log_timestamps:
        fmt = "%(asctime)s " + fmt
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=fmt,
        stream=sys.stderr,
        force=True,
    )

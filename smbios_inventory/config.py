"""
Configuration and logging setup for the inventory decoder.
"""
import sys
import logging
from pathlib import Path
from configparser import ConfigParser, NoOptionError, NoSectionError
from typing import Optional, Union

from smbios_inventory.discovery import SYSFS_ENTRY_POINT, SYSFS_TABLE
from smbios_inventory.session import DecoderSettings

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

DEFAULTS = {
    "sources": {
        "entry_point_path": str(SYSFS_ENTRY_POINT),
        "table_path": str(SYSFS_TABLE),
    },
    "decoding": {
        "strict_checksum": "false",
        "validate_table_checksum": "true",
        "resolve_associations": "true",
    },
    "logging": {
        "log_level": "INFO",
        "log_dir": "",
    },
}


class ConfigManager:
    """Manages decoder configuration from INI file."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.config = ConfigParser()
        self.config.read_dict(DEFAULTS)

    def load(self) -> ConfigParser:
        """Load config file over the defaults. A missing file keeps the defaults."""
        if self.config_path is not None:
            self.config.read(self.config_path)
        return self.config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> str:
        """Get config value with fallback."""
        try:
            return self.config.get(section, key)
        except (NoSectionError, NoOptionError):
            return fallback if fallback else ""

    def getint(self, section: str, key: str, fallback: int = 0) -> int:
        """Get integer config value."""
        try:
            return self.config.getint(section, key)
        except (NoSectionError, NoOptionError, ValueError):
            return fallback

    def getbool(self, section: str, key: str, fallback: bool = False) -> bool:
        """Get boolean config value."""
        try:
            return self.config.getboolean(section, key)
        except (NoSectionError, NoOptionError, ValueError):
            return fallback

    def decoder_settings(self) -> DecoderSettings:
        """Build the [decoding] switches."""
        return DecoderSettings(
            strict_checksum=self.getbool("decoding", "strict_checksum", False),
            validate_table_checksum=self.getbool("decoding", "validate_table_checksum", True),
            resolve_associations=self.getbool("decoding", "resolve_associations", True),
        )


class LogManager:
    """Manages logging for the decoder and CLI."""

    def __init__(self, name: str, log_dir: Optional[Union[str, Path]] = None, level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        # Replace handlers from an earlier setup in the same process
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

        # Console handler, stderr so stdout stays JSON
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(self.logger.level)
        ch.setFormatter(formatter)
        self.logger.addHandler(ch)

        # File handler
        if log_dir:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(self.log_dir / f"{name}.log")
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(formatter)
            self.logger.addHandler(fh)

    def get_logger(self) -> logging.Logger:
        """Get configured logger."""
        return self.logger


def load_settings(config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Load a ConfigManager from ``config_path`` (defaults when None or missing)."""
    manager = ConfigManager(config_path)
    manager.load()
    return manager

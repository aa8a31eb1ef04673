#!/usr/bin/env python3
"""Test INI configuration and logging setup."""

import logging
import tempfile
from pathlib import Path

from smbios_inventory.config import ConfigManager, LogManager, load_settings
from smbios_inventory.session import DecoderSettings


def test_defaults():
    """Test defaults without a config file."""
    print("Testing config defaults...")

    manager = ConfigManager()
    manager.load()
    assert manager.get("sources", "table_path") == "/sys/firmware/dmi/tables/DMI", "Table path mismatch"
    assert manager.get("sources", "entry_point_path") == "/sys/firmware/dmi/tables/smbios_entry_point", \
        "Entry point path mismatch"
    assert manager.get("logging", "log_dir") == "", "Log dir should default to empty"
    assert manager.decoder_settings() == DecoderSettings(), "Default switches mismatch"
    print("  ✓ Defaults work")


def test_ini_overrides(tmp_path):
    """Values from the INI file replace the defaults they name."""
    print("\nTesting INI overrides...")

    path = tmp_path / "smbios.ini"
    path.write_text(
        "[decoding]\n"
        "strict_checksum = yes\n"
        "resolve_associations = off\n"
        "\n"
        "[logging]\n"
        "log_level = DEBUG\n"
    )
    manager = load_settings(path)
    settings = manager.decoder_settings()
    assert settings.strict_checksum, "strict_checksum should be on"
    assert not settings.resolve_associations, "resolve_associations should be off"
    assert settings.validate_table_checksum, "Unset key should keep its default"
    assert manager.get("logging", "log_level") == "DEBUG", "Log level mismatch"

    missing = load_settings(tmp_path / "missing.ini")
    assert missing.decoder_settings() == DecoderSettings(), "Missing file should keep defaults"
    print("  ✓ INI overrides work")


def test_fallbacks():
    """Unknown sections, keys and bad values use the fallback."""
    print("\nTesting fallbacks...")

    manager = load_settings()
    assert manager.get("nope", "key") == "", "Missing key should be empty"
    assert manager.get("nope", "key", "x") == "x", "Fallback not used"
    assert manager.getint("logging", "log_level", 5) == 5, "Non-integer should use fallback"
    assert manager.getbool("nope", "key", True) is True, "Missing bool should use fallback"
    assert manager.getbool("logging", "log_level", True) is True, "Non-boolean should use fallback"
    print("  ✓ Fallbacks work")


def test_log_manager(tmp_path):
    """Console handler always, file handler when a log dir is set."""
    print("\nTesting log manager...")

    name = "smbios_inventory.test_log_manager"
    logger = LogManager(name, log_dir=tmp_path / "logs", level="debug").get_logger()
    assert logger.level == logging.DEBUG, "Level mismatch"
    assert len(logger.handlers) == 2, "Expected console and file handlers"

    logger.info("decoded 3 records")
    for handler in logger.handlers:
        handler.flush()
    log_file = tmp_path / "logs" / f"{name}.log"
    assert log_file.exists(), "Log file should be created"
    assert "decoded 3 records" in log_file.read_text(), "Message should reach the log file"

    again = LogManager(name, level="bogus").get_logger()
    assert len(again.handlers) == 1, "Setup should replace earlier handlers"
    assert again.level == logging.INFO, "Unknown level should fall back to INFO"
    for handler in list(again.handlers):
        again.removeHandler(handler)
    print("  ✓ Log manager works")


if __name__ == "__main__":
    test_defaults()
    with tempfile.TemporaryDirectory() as tmp:
        test_ini_overrides(Path(tmp))
    test_fallbacks()
    with tempfile.TemporaryDirectory() as tmp:
        test_log_manager(Path(tmp))
    print("\n✅ All config tests passed!")

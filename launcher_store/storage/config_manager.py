"""
Reads, writes and upgrades the INI configuration file.

All settings live in the DEFAULT section. Keys added in later releases are
filled in with their defaults the next time an older file is loaded.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from launcher_store.exceptions import ConfigurationError
from launcher_store.models.config import (
    DEFAULT_DIR_NAME,
    DEFAULT_REQUEST_TIMEOUT,
    StoreConfig,
)

log = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "store_url": "",
    "request_timeout": DEFAULT_REQUEST_TIMEOUT,
    "dir_name": DEFAULT_DIR_NAME,
    "data_dir": "",
    "log_json": False,
}


class ConfigManager:
    """Owns one INI file and turns it into a validated StoreConfig."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> StoreConfig:
        """
        Loads the file, upgrades it if keys are missing and validates the result.

        Args:
            cli_options: Values from the command line; they take precedence
            over the file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'launcher-store init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

        if self._add_missing_keys():
            log.info("[yellow]Added new settings to the configuration file.[/yellow]")

        try:
            values = self.get_config_as_dict()
        except ValueError as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e
        values.update(cli_options or {})

        return self._validate(values, config_path=str(self.config_file_path.parent))

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Validates the settings, completes them with defaults and writes a new file.

        Raises:
            ConfigurationError: If the settings are invalid or the file cannot be
            written.
        """
        values = {**DEFAULTS, **settings}
        config = self._validate(values)

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {
            key: self._to_ini_value(getattr(config, key))
            for key in sorted(StoreConfig.get_ini_keys())
        }
        self._write(parser)

    def get_config_as_dict(self) -> dict[str, Any]:
        """
        Reads the DEFAULT section, typed after each key's default value.

        Raises:
            ValueError: If a number or flag cannot be parsed.
        """
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {}
        for key, default in DEFAULTS.items():
            if isinstance(default, bool):
                values[key] = section.getboolean(key, default)
            elif isinstance(default, int):
                values[key] = section.getint(key, default)
            else:
                values[key] = section.get(key, default)
        return values

    @staticmethod
    def _to_ini_value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    @staticmethod
    def _validate(values: dict[str, Any], config_path: str = "") -> StoreConfig:
        try:
            return StoreConfig(**values, config_path=config_path)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _write(self, parser: configparser.ConfigParser) -> None:
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as f:
                parser.write(f)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _add_missing_keys(self) -> bool:
        """Fills in defaults for keys an older file lacks, saving when it changed."""
        section = self._parser["DEFAULT"]
        missing = [key for key in sorted(StoreConfig.get_ini_keys()) if key not in section]
        if not missing:
            return False

        for key in missing:
            section[key] = self._to_ini_value(DEFAULTS[key])
            log.debug(f"Config is missing '{key}', using '{section[key]}'.")

        try:
            self._write(self._parser)
        except ConfigurationError as e:
            log.error(f"Could not save the upgraded configuration file: {e}")
            return False
        return True

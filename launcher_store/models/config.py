"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_DIR_NAME = "ttyhlauncher"
DEFAULT_REQUEST_TIMEOUT = 30


def get_default_data_root() -> Path:
    """Returns the platform's generic writable data location."""
    if os.name == "nt":
        base_dir = Path(os.getenv("LOCALAPPDATA", "~\\AppData\\Local"))
    else:
        base_dir = Path(os.getenv("XDG_DATA_HOME", "~/.local/share"))
    return base_dir.expanduser()


class StoreConfig(BaseModel):
    """A validated configuration model for the application."""

    # Remote store
    store_url: str
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    # Local storage
    dir_name: str = DEFAULT_DIR_NAME
    data_dir: str = ""

    # Logging
    log_json: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("store_url")
    @classmethod
    def validate_store_url(cls, v: str) -> str:
        """Ensures the store URL is an absolute http(s) URL without a trailing slash."""
        if not v:
            raise ValueError("Store URL cannot be empty.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Store URL must start with http:// or https://, got: {v}")
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Ensures a reasonable per-request timeout."""
        if v < 1 or v > 300:
            raise ValueError("Request timeout must be between 1 and 300 seconds.")
        return v

    @field_validator("dir_name")
    @classmethod
    def validate_dir_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("Directory name must be a single, non-empty path component.")
        return v

    @property
    def data_path(self) -> Path:
        """Root storage directory; defaults to the platform data location + dir_name."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return get_default_data_root() / self.dir_name

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}

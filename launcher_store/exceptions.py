"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class LauncherStoreError(Exception):
    """Base exception for all application-specific errors."""


class TransportError(LauncherStoreError):
    """Raised when a request fails, times out, or returns a non-success status."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class SchemaError(LauncherStoreError):
    """Raised when a document is malformed or a required field is missing or empty."""


class StorageError(LauncherStoreError):
    """Raised when a directory cannot be created or a file cannot be read or written."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(LauncherStoreError):
    """Raised for issues related to configuration loading or validation."""

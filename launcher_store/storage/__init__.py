"""
Storage Layer.

This package handles all data persistence: the configuration file and the
store documents mirrored to local storage.
"""

from .config_manager import ConfigManager
from .documents import load_document, read_document, write_document

__all__ = ["ConfigManager", "load_document", "read_document", "write_document"]

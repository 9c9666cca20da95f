"""
Utility helpers: store layout, formatting and structured logging.
"""

from .path import StoreLayout, create_dir
from .structured_logger import (
    FetchLogger,
    RegistryLogger,
    ResolveLogger,
    StructuredLogger,
    create_structured_logger,
)

__all__ = [
    "FetchLogger",
    "RegistryLogger",
    "ResolveLogger",
    "StoreLayout",
    "StructuredLogger",
    "create_dir",
    "create_structured_logger",
]

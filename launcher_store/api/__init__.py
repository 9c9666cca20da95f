"""
Store Transport Layer.

This package handles all HTTP communication with the remote store.
"""

from .client import StoreClient

__all__ = ["StoreClient"]

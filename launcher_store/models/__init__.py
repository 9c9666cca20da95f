"""
Data Models Layer.

This package contains the configuration model, the store document models and
the value types passed between the registry, the orchestrator and the resolver.
"""

from .config import StoreConfig
from .manifests import (
    AssetInfo,
    AssetsIndex,
    CheckInfo,
    DataIndex,
    LibraryInfo,
    PrefixesIndex,
    PrefixInfo,
    PrefixVersionsIndex,
    VersionIndex,
    parse_document,
)
from .stats import ManifestStats
from .versions import FileInfo, FullVersionId, Prefix

__all__ = [
    "AssetInfo",
    "AssetsIndex",
    "CheckInfo",
    "DataIndex",
    "FileInfo",
    "FullVersionId",
    "LibraryInfo",
    "ManifestStats",
    "Prefix",
    "PrefixInfo",
    "PrefixVersionsIndex",
    "PrefixesIndex",
    "StoreConfig",
    "VersionIndex",
    "parse_document",
]

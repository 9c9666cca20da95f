"""
Version management engine.

The `VersionRegistry` seeds prefixes and versions from local storage, the
`FetchOrchestrator` refreshes them from the remote store, and the
`ManifestResolver` turns a fetched version into a flat list of files.
"""

from .guards import GuardState, OperationGuard
from .orchestrator import FetchOrchestrator
from .pipeline import Stage, StagePipeline
from .platform import get_library_path, is_library_allowed
from .registry import VersionRegistry
from .resolver import ManifestResolver, ResolveResult

__all__ = [
    "FetchOrchestrator",
    "GuardState",
    "ManifestResolver",
    "OperationGuard",
    "ResolveResult",
    "Stage",
    "StagePipeline",
    "VersionRegistry",
    "get_library_path",
    "is_library_allowed",
]

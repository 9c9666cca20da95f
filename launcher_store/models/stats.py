"""
Dataclass for summarizing a resolved download manifest.
"""

from dataclasses import dataclass


@dataclass
class ManifestStats:
    """Counts and sizes collected while resolving one version's file list."""

    main_files: int = 0
    auxiliary_files: int = 0
    libraries: int = 0
    assets: int = 0
    libraries_filtered: int = 0
    libraries_missing: int = 0
    libraries_invalid: int = 0
    total_size: int = 0

    @property
    def total_files(self) -> int:
        return self.main_files + self.auxiliary_files + self.libraries + self.assets

    def record(self, group: str, size: int) -> None:
        """Counts one emitted entry of the given group."""
        setattr(self, group, getattr(self, group) + 1)
        self.total_size += size

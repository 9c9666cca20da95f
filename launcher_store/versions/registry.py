"""
In-memory registry of prefixes and versions, seeded from local storage.
"""

import logging

from launcher_store.exceptions import LauncherStoreError, StorageError
from launcher_store.models.manifests import (
    PrefixesIndex,
    PrefixVersionsIndex,
    VersionIndex,
)
from launcher_store.models.versions import FullVersionId, Prefix
from launcher_store.storage.documents import load_document
from launcher_store.utils.path import StoreLayout, create_dir
from launcher_store.utils.structured_logger import RegistryLogger, StructuredLogger

log = logging.getLogger(__name__)


class VersionRegistry:
    """
    Owns the prefix map and the prefixes index mirrored on disk.

    It is populated once at construction from local storage, without touching
    the network. Afterwards only the fetch orchestrator mutates it; everything
    else reads snapshots via `get_prefixes()`.
    """

    def __init__(self, layout: StoreLayout, events: RegistryLogger | None = None):
        self.layout = layout
        self.events = events or RegistryLogger(
            StructuredLogger("launcher_store", enable_json=False)
        )
        self.index = PrefixesIndex()
        self._prefixes: dict[str, Prefix] = {}

        try:
            create_dir(layout.versions_dir)
        except OSError as e:
            raise StorageError(
                f"Failed to create '{layout.versions_dir}': {e}",
                path=str(layout.versions_dir),
            ) from e

        self._load_index()

        for prefix_id, info in self.index.prefixes.items():
            if not prefix_id:
                continue
            self._prefixes[prefix_id] = Prefix(prefix_id, info.about)
            self.find_local_versions(prefix_id)

        self.events.initialized(len(self.index.prefixes))

    def _load_index(self) -> None:
        """Loads the prefixes document; a missing one is normal on first run."""
        path = self.layout.prefixes_index_path
        if not path.is_file():
            self.events.index_created(path)
            return
        try:
            self.index = load_document(PrefixesIndex, path)
        except LauncherStoreError as e:
            self.events.index_unreadable(path, str(e))

    def find_local_versions(self, prefix_id: str) -> None:
        """
        Scans a prefix's folder for version manifests and records the valid ones.

        A version is accepted only when the manifest's own id equals its folder
        name. Unreadable or mismatching entries are logged and skipped.

        When more than one version is known, the prefix's latest version is set
        to the second entry of the descending list. This mirrors the behaviour
        of earlier launcher releases.
        """
        prefix = self._prefixes[prefix_id]
        prefix_dir = self.layout.prefix_dir(prefix_id)
        found = []

        version_dirs = []
        if prefix_dir.is_dir():
            version_dirs = sorted(p for p in prefix_dir.iterdir() if p.is_dir())

        for version_dir in version_dirs:
            version_id = version_dir.name
            index_path = self.layout.version_index_path(FullVersionId(prefix_id, version_id))
            if not index_path.is_file():
                continue

            try:
                version_index = load_document(VersionIndex, index_path)
            except LauncherStoreError as e:
                self.events.version_unreadable(index_path, str(e))
                continue

            if version_index.id != version_id:
                self.events.version_id_mismatch(index_path, version_index.id)
                continue

            found.append(version_id)
            self.events.local_version_found(prefix_id, version_id)

        prefix.merge_versions(found)

        if len(prefix.versions) > 1:
            prefix.latest_version_id = prefix.versions[1]

    def merge_remote_index(self, remote: PrefixesIndex) -> list[str]:
        """
        Folds a remote prefixes index into the local one, remote winning per key.

        Returns:
            The remote prefix ids, in document order.
        """
        merged = []
        for prefix_id, info in remote.prefixes.items():
            if not prefix_id:
                log.debug("Ignoring a remote prefix with an empty id.")
                continue
            self.index.prefixes[prefix_id] = info
            if prefix_id not in self._prefixes:
                self._prefixes[prefix_id] = Prefix(prefix_id, info.about)
            merged.append(prefix_id)
        return merged

    def apply_versions_index(
        self, prefix_id: str, versions_index: PrefixVersionsIndex
    ) -> Prefix:
        """Takes the remote latest version and unions the remote versions in."""
        prefix = self._prefixes.setdefault(prefix_id, Prefix(prefix_id))
        prefix.latest_version_id = versions_index.latest
        prefix.merge_versions(versions_index.versions)
        return prefix.copy()

    def get_prefixes(self) -> dict[str, Prefix]:
        """Returns a read-only snapshot of the prefix map."""
        return {prefix_id: prefix.copy() for prefix_id, prefix in self._prefixes.items()}

    def get_prefix(self, prefix_id: str) -> Prefix | None:
        prefix = self._prefixes.get(prefix_id)
        return prefix.copy() if prefix else None

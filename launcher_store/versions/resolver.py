"""
Builds a version's download manifest from the documents on local storage.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from launcher_store.exceptions import LauncherStoreError, SchemaError
from launcher_store.models.manifests import (
    AssetsIndex,
    DataIndex,
    LibraryInfo,
    VersionIndex,
)
from launcher_store.models.stats import ManifestStats
from launcher_store.models.versions import FileInfo, FullVersionId
from launcher_store.storage.documents import load_document
from launcher_store.utils.path import StoreLayout
from launcher_store.utils.structured_logger import ResolveLogger, StructuredLogger

from .platform import get_library_path, is_library_allowed

log = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """The outcome of resolving one version: its file list, or why it failed."""

    version: FullVersionId
    files: list[FileInfo] = field(default_factory=list)
    stats: ManifestStats = field(default_factory=ManifestStats)
    error: LauncherStoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ManifestResolver:
    """
    Cross-references a version's data index, manifest and assets index.

    The output order is fixed: the main archive, the auxiliary files in data
    index order, the platform-applicable libraries in manifest order, then the
    assets in assets index order. Entries are not deduplicated across groups.
    """

    def __init__(
        self,
        layout: StoreLayout,
        events: ResolveLogger | None = None,
        library_allowed: Callable[[LibraryInfo], bool] = is_library_allowed,
        library_path: Callable[[LibraryInfo], str] = get_library_path,
    ):
        """
        Args:
            layout: Remote and local locations of the store.
            events: Structured event sink.
            library_allowed: Decides whether a library applies to this platform.
            library_path: Derives a library's relative storage path.
        """
        self.layout = layout
        self.events = events or ResolveLogger(
            StructuredLogger("launcher_store", enable_json=False)
        )
        self.library_allowed = library_allowed
        self.library_path = library_path

    def resolve_download_manifest(self, version: FullVersionId) -> ResolveResult:
        """
        Collects every file the version needs, reading local storage only.

        Failures never raise; they are reported through `ResolveResult.error`.
        """
        result = ResolveResult(version)
        self.events.resolve_started(str(version))
        try:
            self._collect(version, result)
        except LauncherStoreError as e:
            self.events.resolve_failed(str(version), str(e))
            return ResolveResult(version, error=e)

        self.events.resolve_completed(
            str(version), len(result.files), result.stats.total_size
        )
        return result

    def _emit(
        self, result: ResolveResult, group: str, url: str, path, hash_: str, size: int
    ) -> None:
        result.files.append(FileInfo(url, str(path), hash_, size))
        result.stats.record(group, size)

    def _collect(self, version: FullVersionId, result: ResolveResult) -> None:
        data_index = load_document(DataIndex, self.layout.data_index_path(version))

        self._emit(
            result,
            "main_files",
            self.layout.main_archive_url(version),
            self.layout.main_archive_path(version),
            data_index.main.hash,
            data_index.main.size,
        )

        for file_name, check in data_index.files.items():
            self._emit(
                result,
                "auxiliary_files",
                self.layout.version_file_url(version, file_name),
                self.layout.version_file_path(version, file_name),
                check.hash,
                check.size,
            )

        version_index = load_document(
            VersionIndex, self.layout.version_index_path(version)
        )

        for library in version_index.libraries:
            if not self.library_allowed(library):
                result.stats.libraries_filtered += 1
                continue

            try:
                lib_path = self.library_path(library)
            except SchemaError as e:
                self.events.library_invalid(str(version), library.name, str(e))
                result.stats.libraries_invalid += 1
                continue

            check = data_index.libs.get(lib_path)
            if check is None:
                self.events.library_missing(str(version), lib_path)
                result.stats.libraries_missing += 1
                continue

            self._emit(
                result,
                "libraries",
                self.layout.library_url(lib_path),
                self.layout.library_path(lib_path),
                check.hash,
                check.size,
            )

        if not version_index.assets_index:
            raise SchemaError(f"Version '{version}' has an empty assets index reference")

        assets_index = load_document(
            AssetsIndex, self.layout.assets_index_path(version_index.assets_index)
        )

        for asset in assets_index.objects.values():
            name = asset.storage_name
            self._emit(
                result,
                "assets",
                self.layout.asset_url(name),
                self.layout.asset_path(name),
                asset.hash,
                asset.size,
            )

        log.debug(f"Need to check {len(result.files)} files for '{version}'.")

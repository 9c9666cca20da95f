"""
Utilities for building remote URLs and local paths of the store layout.
"""

from pathlib import Path

from launcher_store.models.versions import FullVersionId


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


class StoreLayout:
    """
    Maps store documents and payloads onto remote URLs and local paths.

    The local tree mirrors the remote one: version documents live under
    `<data_dir>/versions`, shared libraries and assets directly under `<data_dir>`.
    """

    def __init__(self, store_url: str, data_dir: Path) -> None:
        self.store_url = store_url.rstrip("/")
        self.data_dir = Path(data_dir)
        self.versions_dir = self.data_dir / "versions"

    # Remote
    def prefixes_url(self) -> str:
        return f"{self.store_url}/prefixes.json"

    def prefix_versions_url(self, prefix_id: str) -> str:
        return f"{self.store_url}/{prefix_id}/versions/versions.json"

    def version_index_url(self, version: FullVersionId) -> str:
        return f"{self.store_url}/{version.prefix}/{version.id}/{version.id}.json"

    def data_index_url(self, version: FullVersionId) -> str:
        return f"{self.store_url}/{version.prefix}/{version.id}/data.json"

    def assets_index_url(self, assets_index: str) -> str:
        return f"{self.store_url}/assets/indexes/{assets_index}.json"

    def main_archive_url(self, version: FullVersionId) -> str:
        return f"{self.store_url}/{version.prefix}/{version.id}/{version.id}.jar"

    def version_file_url(self, version: FullVersionId, file_name: str) -> str:
        return f"{self.store_url}/{version}/files/{file_name}"

    def library_url(self, library_path: str) -> str:
        return f"{self.store_url}/libraries/{library_path}"

    def asset_url(self, storage_name: str) -> str:
        return f"{self.store_url}/assets/objects/{storage_name}"

    # Local
    @property
    def prefixes_index_path(self) -> Path:
        return self.versions_dir / "prefixes.json"

    def prefix_dir(self, prefix_id: str) -> Path:
        return self.versions_dir / prefix_id

    def version_dir(self, version: FullVersionId) -> Path:
        return self.versions_dir / version.prefix / version.id

    def version_index_path(self, version: FullVersionId) -> Path:
        return self.version_dir(version) / f"{version.id}.json"

    def data_index_path(self, version: FullVersionId) -> Path:
        return self.version_dir(version) / "data.json"

    def main_archive_path(self, version: FullVersionId) -> Path:
        return self.version_dir(version) / f"{version.id}.jar"

    def version_file_path(self, version: FullVersionId, file_name: str) -> Path:
        return self.version_dir(version) / "files" / file_name

    def assets_index_path(self, assets_index: str) -> Path:
        return self.data_dir / "assets" / "indexes" / f"{assets_index}.json"

    def library_path(self, library_path: str) -> Path:
        return self.data_dir / "libraries" / library_path

    def asset_path(self, storage_name: str) -> Path:
        return self.data_dir / "assets" / "objects" / storage_name

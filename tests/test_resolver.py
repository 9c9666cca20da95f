"""
Tests for building a version's download manifest from local documents.
"""

import pytest

from launcher_store.exceptions import SchemaError, StorageError
from launcher_store.models.versions import FullVersionId
from launcher_store.versions.resolver import ManifestResolver

from .conftest import STORE_URL

VERSION = FullVersionId("release", "1.12.2")
ASSETS_REF = "1584b57c1d0f9b4ec9e7e4b4c3a3d6b2a4f3e1c2/1.12"
LIB_PATH = "org/lwjgl/lwjgl/lwjgl/2.9.4/lwjgl-2.9.4.jar"


def _allow_all(library):
    return True


@pytest.fixture
def resolver(layout):
    return ManifestResolver(layout, library_allowed=_allow_all)


@pytest.fixture
def seeded(layout, write_json, current_manifest):
    """Writes a complete set of local documents for VERSION."""
    write_json(
        layout.version_index_path(VERSION),
        current_manifest(libraries=[{"name": "org.lwjgl.lwjgl:lwjgl:2.9.4"}]),
    )
    write_json(
        layout.data_index_path(VERSION),
        {
            "main": {"hash": "aa11", "size": 100},
            "files": {"options.txt": {"hash": "bb22", "size": 20}},
            "libs": {LIB_PATH: {"hash": "cc33", "size": 300}},
        },
    )
    write_json(
        layout.assets_index_path(ASSETS_REF),
        {"objects": {"icons/icon.png": {"hash": "dd44eeff", "size": 4}}},
    )


class TestResolveDownloadManifest:
    def test_emits_groups_in_fixed_order(self, resolver, layout, seeded):
        result = resolver.resolve_download_manifest(VERSION)

        assert result.ok
        assert [(f.url, f.hash, f.size) for f in result.files] == [
            (f"{STORE_URL}/release/1.12.2/1.12.2.jar", "aa11", 100),
            (f"{STORE_URL}/release/1.12.2/files/options.txt", "bb22", 20),
            (f"{STORE_URL}/libraries/{LIB_PATH}", "cc33", 300),
            (f"{STORE_URL}/assets/objects/dd/dd44eeff", "dd44eeff", 4),
        ]
        assert result.files[0].path == str(layout.main_archive_path(VERSION))
        assert result.files[1].path == str(layout.version_file_path(VERSION, "options.txt"))
        assert result.files[2].path == str(layout.library_path(LIB_PATH))
        assert result.files[3].path == str(layout.asset_path("dd/dd44eeff"))

    def test_collects_stats(self, resolver, seeded):
        stats = resolver.resolve_download_manifest(VERSION).stats

        assert (stats.main_files, stats.auxiliary_files, stats.libraries, stats.assets) == (
            1,
            1,
            1,
            1,
        )
        assert stats.total_size == 424

    def test_library_missing_from_data_index_is_skipped(
        self, resolver, layout, write_json, seeded, current_manifest
    ):
        write_json(
            layout.version_index_path(VERSION),
            current_manifest(
                libraries=[
                    {"name": "com.example:ghost:1.0"},
                    {"name": "org.lwjgl.lwjgl:lwjgl:2.9.4"},
                ]
            ),
        )

        result = resolver.resolve_download_manifest(VERSION)

        assert result.ok
        assert [f.hash for f in result.files] == ["aa11", "bb22", "cc33", "dd44eeff"]
        assert result.stats.libraries_missing == 1

    def test_invalid_library_name_is_skipped(
        self, resolver, layout, write_json, seeded, current_manifest
    ):
        write_json(
            layout.version_index_path(VERSION),
            current_manifest(
                libraries=[{"name": "broken"}, {"name": "org.lwjgl.lwjgl:lwjgl:2.9.4"}]
            ),
        )

        result = resolver.resolve_download_manifest(VERSION)

        assert result.ok
        assert [f.hash for f in result.files] == ["aa11", "bb22", "cc33", "dd44eeff"]
        assert result.stats.libraries_invalid == 1

    def test_filtered_libraries_are_not_emitted(self, layout, seeded):
        resolver = ManifestResolver(layout, library_allowed=lambda library: False)

        result = resolver.resolve_download_manifest(VERSION)

        assert [f.hash for f in result.files] == ["aa11", "bb22", "dd44eeff"]
        assert result.stats.libraries_filtered == 1

    def test_legacy_manifest_uses_plain_assets_reference(
        self, resolver, layout, write_json, legacy_manifest
    ):
        version = FullVersionId("release", "1.7.10")
        write_json(layout.version_index_path(version), legacy_manifest())
        write_json(layout.data_index_path(version), {"main": {"hash": "m", "size": 1}})
        write_json(
            layout.assets_index_path("1.7.10"),
            {"objects": {"a": {"hash": "0123", "size": 2}, "b": {"hash": "4567", "size": 3}}},
        )

        result = resolver.resolve_download_manifest(version)

        assert [f.hash for f in result.files] == ["m", "0123", "4567"]

    def test_same_hash_is_not_deduplicated(self, resolver, layout, write_json, seeded):
        write_json(
            layout.assets_index_path(ASSETS_REF),
            {"objects": {"a": {"hash": "aa11", "size": 100}}},
        )

        result = resolver.resolve_download_manifest(VERSION)

        assert [f.hash for f in result.files].count("aa11") == 2


class TestResolveFailures:
    def test_missing_data_index(self, resolver):
        result = resolver.resolve_download_manifest(VERSION)

        assert not result.ok
        assert isinstance(result.error, StorageError)
        assert result.files == []

    def test_missing_assets_index(self, resolver, layout, seeded):
        layout.assets_index_path(ASSETS_REF).unlink()

        result = resolver.resolve_download_manifest(VERSION)

        assert isinstance(result.error, StorageError)
        assert result.files == []

    def test_empty_assets_reference(self, resolver, layout, write_json, seeded, legacy_manifest):
        write_json(layout.version_index_path(VERSION), legacy_manifest("1.12.2", assets=""))

        result = resolver.resolve_download_manifest(VERSION)

        assert isinstance(result.error, SchemaError)

    def test_corrupt_manifest(self, resolver, layout, seeded):
        layout.version_index_path(VERSION).write_text("[1, 2]", encoding="utf-8")

        result = resolver.resolve_download_manifest(VERSION)

        assert isinstance(result.error, SchemaError)
        assert result.stats.total_files == 0

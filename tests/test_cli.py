"""
End-to-end tests of the typer CLI against a temporary config and data directory.
"""

import json

import pytest
from typer.testing import CliRunner

from launcher_store.cli import app as cli_app
from launcher_store.models.versions import FullVersionId

from .conftest import STORE_URL, FakeStoreClient

runner = CliRunner()


class ContextFakeClient(FakeStoreClient):
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config" / "config.ini"
    monkeypatch.setattr(cli_app, "CONFIG_FILE", path)
    return path


@pytest.fixture
def initialized(config_file, layout):
    result = runner.invoke(
        cli_app.app, ["init", STORE_URL, "--data-dir", str(layout.data_dir), "--force"]
    )
    assert result.exit_code == 0, result.output
    return config_file


@pytest.fixture
def store(monkeypatch):
    client = ContextFakeClient()
    monkeypatch.setattr(cli_app, "StoreClient", lambda request_timeout: client)
    return client


def test_init_writes_config(initialized):
    assert "store_url = https://store.test" in initialized.read_text(encoding="utf-8")


def test_init_rejects_invalid_url(config_file):
    result = runner.invoke(cli_app.app, ["init", "not-a-url", "--force"])

    assert result.exit_code == 1
    assert not config_file.exists()


def test_commands_require_config(config_file):
    result = runner.invoke(cli_app.app, ["prefixes"])

    assert result.exit_code == 1
    assert "ConfigurationError" in result.output


def test_validate_shows_settings(initialized):
    result = runner.invoke(cli_app.app, ["validate"])

    assert result.exit_code == 0
    assert STORE_URL in result.output


def test_prefixes_fetch_lists_remote_prefixes(initialized, store):
    store.add_json(f"{STORE_URL}/prefixes.json", {"prefixes": {"release": {"about": "Stable"}}})
    store.add_json(
        f"{STORE_URL}/release/versions/versions.json",
        {"latest": "1.12.2", "versions": ["1.12.2", "1.7.10"]},
    )

    result = runner.invoke(cli_app.app, ["prefixes", "--fetch"])

    assert result.exit_code == 0, result.output
    assert "release" in result.output
    assert "1.12.2" in result.output


def test_prefixes_fetch_failure_exits_with_error(initialized, store):
    result = runner.invoke(cli_app.app, ["prefixes", "--fetch"])

    assert result.exit_code == 1
    assert "TransportError" in result.output


def test_malformed_version_argument(initialized):
    result = runner.invoke(cli_app.app, ["resolve", "no-prefix"])

    assert result.exit_code == 2


def test_resolve_writes_json(initialized, layout, write_json, legacy_manifest, tmp_path):
    version = FullVersionId("release", "1.7.10")
    write_json(layout.version_index_path(version), legacy_manifest())
    write_json(layout.data_index_path(version), {"main": {"hash": "abc", "size": 7}})
    write_json(layout.assets_index_path("1.7.10"), {"objects": {}})
    output = tmp_path / "files.json"

    result = runner.invoke(cli_app.app, ["resolve", "release/1.7.10", "--json", str(output)])

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {
            "url": f"{STORE_URL}/release/1.7.10/1.7.10.jar",
            "path": str(layout.main_archive_path(version)),
            "hash": "abc",
            "size": 7,
        }
    ]


def test_resolve_without_local_documents_fails(initialized):
    result = runner.invoke(cli_app.app, ["resolve", "release/1.7.10"])

    assert result.exit_code == 1
    assert "StorageError" in result.output


def test_fetch_then_info(initialized, store, current_manifest):
    store.add_json(f"{STORE_URL}/release/1.12.2/1.12.2.json", current_manifest())
    store.add_json(
        f"{STORE_URL}/assets/indexes/1584b57c1d0f9b4ec9e7e4b4c3a3d6b2a4f3e1c2/1.12.json",
        {"objects": {}},
    )
    store.add_json(f"{STORE_URL}/release/1.12.2/data.json", {"main": {"hash": "a", "size": 1}})

    fetched = runner.invoke(cli_app.app, ["fetch", "release/1.12.2"])
    shown = runner.invoke(cli_app.app, ["info", "release/1.12.2"])

    assert fetched.exit_code == 0, fetched.output
    assert shown.exit_code == 0, shown.output
    assert "net.minecraft.client.main.Main" in shown.output

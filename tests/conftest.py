import json
from pathlib import Path

import pytest

from launcher_store.exceptions import TransportError
from launcher_store.utils.path import StoreLayout

STORE_URL = "https://store.test"


class FakeStoreClient:
    """
    Scripted transport serving canned bodies by URL.

    Unknown URLs fail like a 404. `on_request` is an optional coroutine called
    before each response, used to act while a fetch is in flight.
    """

    def __init__(self):
        self.responses: dict[str, bytes | Exception] = {}
        self.requests: list[str] = []
        self.on_request = None

    def add_json(self, url: str, payload) -> bytes:
        body = json.dumps(payload).encode("utf-8")
        self.responses[url] = body
        return body

    async def fetch(self, url: str) -> bytes:
        self.requests.append(url)
        if self.on_request is not None:
            await self.on_request(url)
        response = self.responses.get(url)
        if response is None:
            raise TransportError(f"Request to '{url}' failed with status 404", url=url, status=404)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def layout(tmp_path) -> StoreLayout:
    return StoreLayout(STORE_URL, tmp_path / "data")


@pytest.fixture
def fake_client() -> FakeStoreClient:
    return FakeStoreClient()


@pytest.fixture
def write_json():
    """Writes a JSON document, creating parent directories."""

    def _write(path: Path, payload) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def current_manifest():
    """A version manifest in the current schema generation."""

    def _build(version_id: str = "1.12.2", libraries=None) -> dict:
        return {
            "id": version_id,
            "releaseTime": "2017-09-18T08:39:46+00:00",
            "assetIndex": {
                "id": "1.12",
                "sha1": "1584b57c1d0f9b4ec9e7e4b4c3a3d6b2a4f3e1c2",
                "size": 169014,
            },
            "libraries": libraries if libraries is not None else [],
            "mainClass": "net.minecraft.client.main.Main",
            "arguments": {
                "game": [
                    "--username",
                    "${auth_player_name}",
                    {"rules": [{"action": "allow"}], "value": "--demo"},
                    "--version",
                    "${version_name}",
                ]
            },
        }

    return _build


@pytest.fixture
def legacy_manifest():
    """A version manifest in the legacy schema generation."""

    def _build(version_id: str = "1.7.10", assets: str = "1.7.10", libraries=None) -> dict:
        return {
            "id": version_id,
            "releaseTime": "2014-05-14T17:29:23+00:00",
            "assets": assets,
            "libraries": libraries if libraries is not None else [],
            "mainClass": "net.minecraft.client.main.Main",
            "minecraftArguments": "--username ${auth_player_name} --version ${version_name}",
        }

    return _build

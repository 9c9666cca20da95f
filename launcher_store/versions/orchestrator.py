"""
Remote fetch orchestration: prefix discovery and the per-version index chain.
"""

import logging
import time
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from launcher_store.exceptions import LauncherStoreError, SchemaError
from launcher_store.models.manifests import (
    PrefixesIndex,
    PrefixVersionsIndex,
    VersionIndex,
    parse_document,
)
from launcher_store.models.versions import FullVersionId
from launcher_store.storage.documents import write_document
from launcher_store.utils.structured_logger import FetchLogger, StructuredLogger

from .guards import OperationGuard
from .pipeline import Stage, StagePipeline
from .registry import VersionRegistry

log = logging.getLogger(__name__)

ResultCallback = Callable[[bool], None]


class DocumentFetcher(Protocol):
    """Anything that can fetch a document body, raising TransportError on failure."""

    async def fetch(self, url: str) -> bytes: ...


class FetchOrchestrator:
    """
    Runs the two remote fetch sequences against the store.

    Each sequence is a strict chain with at most one request in flight, guarded
    so that only one run of each kind exists at a time. A call made while the
    same kind of fetch is running is rejected at once: it returns False and
    fires no completion callback. Otherwise the result is returned and the
    matching callback fires exactly once, after the guard is back to idle.

    There is no retry and no rollback. Whatever was merged or written before a
    failure stays in place.
    """

    def __init__(
        self,
        registry: VersionRegistry,
        client: DocumentFetcher,
        events: FetchLogger | None = None,
        on_fetch_prefixes_result: ResultCallback | None = None,
        on_fetch_version_indexes_result: ResultCallback | None = None,
    ):
        """
        Args:
            registry: The registry that receives merged prefixes and versions.
            client: The transport used for every request.
            events: Structured event sink.
            on_fetch_prefixes_result: Called with the outcome of `fetch_prefixes`.
            on_fetch_version_indexes_result: Called with the outcome of
            `fetch_version_indexes`.
        """
        self.registry = registry
        self.layout = registry.layout
        self.client = client
        self.events = events or FetchLogger(
            StructuredLogger("launcher_store", enable_json=False)
        )
        self.on_fetch_prefixes_result = on_fetch_prefixes_result
        self.on_fetch_version_indexes_result = on_fetch_version_indexes_result

        self._prefixes_guard = OperationGuard("fetch_prefixes")
        self._indexes_guard = OperationGuard("fetch_version_indexes")
        self._prefix_queue: deque[str] = deque()

        # The error that ended the most recent failed run of each operation.
        self.last_prefixes_error: LauncherStoreError | None = None
        self.last_version_indexes_error: LauncherStoreError | None = None

    @property
    def fetching_prefixes(self) -> bool:
        return self._prefixes_guard.busy

    @property
    def fetching_version_indexes(self) -> bool:
        return self._indexes_guard.busy

    async def _request(self, url: str) -> bytes:
        self.events.request_started(url)
        return await self.client.fetch(url)

    async def _save(self, path: Path, data: bytes) -> None:
        await write_document(path, data)
        self.events.document_saved(path, len(data))

    # Prefix discovery

    async def fetch_prefixes(self) -> bool:
        """
        Discovers the remote prefixes and merges each prefix's version list.

        Returns:
            True if every prefix was fetched and merged, False otherwise.
        """
        if not self._prefixes_guard.try_start():
            self.events.fetch_rejected("fetch_prefixes")
            return False

        self.events.fetch_started("fetch_prefixes")
        start_time = time.monotonic()
        error = None
        try:
            await self._fetch_prefixes_index()
            await self._drain_prefix_queue()
        except LauncherStoreError as e:
            error = e
        except BaseException:
            self._prefix_queue.clear()
            self._prefixes_guard.finish()
            raise

        return self._set_fetch_prefixes_result(error, start_time)

    async def _fetch_prefixes_index(self) -> None:
        url = self.layout.prefixes_url()
        remote = parse_document(PrefixesIndex, await self._request(url), source=url)

        self._prefix_queue.extend(self.registry.merge_remote_index(remote))
        await self._save(
            self.layout.prefixes_index_path, self.registry.index.to_json_bytes()
        )

    async def _drain_prefix_queue(self) -> None:
        while self._prefix_queue:
            prefix_id = self._prefix_queue.popleft()
            url = self.layout.prefix_versions_url(prefix_id)
            versions_index = parse_document(
                PrefixVersionsIndex, await self._request(url), source=url
            )
            prefix = self.registry.apply_versions_index(prefix_id, versions_index)
            self.events.prefix_merged(
                prefix.id, prefix.latest_version_id, len(prefix.versions)
            )

    def _set_fetch_prefixes_result(
        self, error: LauncherStoreError | None, start_time: float
    ) -> bool:
        result = error is None
        if result:
            self.events.fetch_completed("fetch_prefixes", time.monotonic() - start_time)
        else:
            self.events.fetch_failed("fetch_prefixes", str(error), type(error).__name__)
        self.last_prefixes_error = error

        self._prefix_queue.clear()
        self._prefixes_guard.finish()

        if self.on_fetch_prefixes_result:
            self.on_fetch_prefixes_result(result)
        return result

    # Version index chain

    async def fetch_version_indexes(self, version: FullVersionId) -> bool:
        """
        Fetches a version's manifest, then its assets index, then its data index.

        Only one version can be fetched at a time, whichever version it is.

        Returns:
            True if all three documents were fetched and saved, False otherwise.
        """
        if not self._indexes_guard.try_start():
            self.events.fetch_rejected("fetch_version_indexes")
            return False

        self.events.fetch_started("fetch_version_indexes", str(version))
        start_time = time.monotonic()
        pipeline = StagePipeline(
            f"indexes {version}",
            [
                Stage("version index", lambda _: self._fetch_version_index(version)),
                Stage(
                    "assets index",
                    lambda assets_index: self._fetch_assets_index(version, assets_index),
                ),
                Stage("data index", lambda _: self._fetch_data_index(version)),
            ],
        )

        error = None
        try:
            await pipeline.run()
        except LauncherStoreError as e:
            error = e
        except BaseException:
            self._indexes_guard.finish()
            raise

        return self._set_fetch_version_indexes_result(error, start_time)

    async def _fetch_version_index(self, version: FullVersionId) -> str:
        """Saves the version manifest and returns its assets reference."""
        data = await self._request(self.layout.version_index_url(version))
        await self._save(self.layout.version_index_path(version), data)
        version_index = parse_document(
            VersionIndex, data, source=str(self.layout.version_index_path(version))
        )
        return version_index.assets_index

    async def _fetch_assets_index(self, version: FullVersionId, assets_index: str) -> None:
        if not assets_index:
            raise SchemaError(
                f"Failed to resolve assets index path for the version '{version}'"
            )
        data = await self._request(self.layout.assets_index_url(assets_index))
        await self._save(self.layout.assets_index_path(assets_index), data)

    async def _fetch_data_index(self, version: FullVersionId) -> None:
        data = await self._request(self.layout.data_index_url(version))
        await self._save(self.layout.data_index_path(version), data)

    def _set_fetch_version_indexes_result(
        self, error: LauncherStoreError | None, start_time: float
    ) -> bool:
        result = error is None
        if result:
            self.events.fetch_completed(
                "fetch_version_indexes", time.monotonic() - start_time
            )
        else:
            self.events.fetch_failed(
                "fetch_version_indexes", str(error), type(error).__name__
            )
        self.last_version_indexes_error = error

        self._indexes_guard.finish()

        if self.on_fetch_version_indexes_result:
            self.on_fetch_version_indexes_result(result)
        return result

"""
Async HTTP client for fetching store documents.
"""

import asyncio
import logging
import time

import aiohttp

from launcher_store.exceptions import TransportError

log = logging.getLogger(__name__)


class StoreClient:
    """
    Thin aiohttp wrapper that fetches whole documents from the store.

    Every request carries the same fixed timeout. Timeouts, connection errors
    and non-success statuses all surface as TransportError; nothing is retried.
    """

    USER_AGENT = "launcher-store"

    def __init__(self, request_timeout: float = 30):
        """
        Initializes the client.

        Args:
            request_timeout: Total time budget of one request, in seconds.
        """
        self.request_timeout = request_timeout
        self._session: aiohttp.ClientSession | None = None

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": self.USER_AGENT,
                    "Accept-Encoding": "gzip, deflate",
                },
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "StoreClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> bytes:
        """
        Downloads the body of a single document.

        Raises:
            TransportError: If the request fails, times out or is not answered with 2xx.
        """
        session = await self._initialize_session()
        start_time = time.monotonic()
        log.debug(f"Requesting '{url}'...")

        try:
            async with session.get(url) as r:
                if not 200 <= r.status < 300:
                    raise TransportError(
                        f"Request to '{url}' failed with status {r.status} {r.reason}",
                        url=url,
                        status=r.status,
                    )
                body = await r.read()
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request to '{url}' timed out after {self.request_timeout}s", url=url
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to '{url}' failed: {e}", url=url) from e

        duration_ms = (time.monotonic() - start_time) * 1000
        log.debug(f"Fetched '{url}' ({len(body)} bytes, {duration_ms:.0f} ms)")
        return body

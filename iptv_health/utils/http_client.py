"""Shared HTTP helpers for playlist downloads and stream probes."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp
import requests

REAL_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS: Dict[str, str] = {
    "user-agent": REAL_USER_AGENT,
    "accept": "*/*",
}


class FetchError(Exception):
    """Raised when a playlist cannot be downloaded (network error or non-2xx status)."""


@dataclass
class ProbeResponse:
    """Status, content type and leading body bytes of a probe request."""

    url: str
    status: int
    content_type: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="ignore")


class HttpClient:
    """Handles playlist requests (blocking) and stream probes (async)."""

    def __init__(self, timeout: int = 30) -> None:
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

        self._probe_session: Optional[aiohttp.ClientSession] = None
        self._probe_lock: Optional[asyncio.Lock] = None
        self._probe_loop: Optional[asyncio.AbstractEventLoop] = None

    def fetch_text(self, url: str) -> str:
        """GET a text resource such as a playlist manifest."""

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logging.error("HTTP GET to %s failed: %s", url, exc)
            raise FetchError(f"Failed to fetch playlist: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logging.error("HTTP GET to %s returned status %s", url, response.status_code)
            raise FetchError(f"Failed to fetch playlist: {response.status_code}")

        if not response.encoding:
            response.encoding = "utf-8"
        return response.text

    async def fetch_text_async(self, url: str) -> str:
        """Runs :meth:`fetch_text` on a worker thread so the event loop keeps going."""

        return await asyncio.to_thread(self.fetch_text, url)

    async def probe(self, url: str, headers: Dict[str, str], max_bytes: int) -> ProbeResponse:
        """GET ``url`` and read the body until ``max_bytes`` are collected or it ends.

        Network errors propagate; the caller owns timeout and cancellation.
        """

        session = await self._get_probe_session()
        async with session.get(url, headers=headers, allow_redirects=True) as resp:
            body = b""
            if 200 <= resp.status < 300:
                while len(body) < max_bytes:
                    chunk = await resp.content.read(max_bytes - len(body))
                    if not chunk:
                        break
                    body += chunk
            return ProbeResponse(
                url=str(resp.url),
                status=resp.status,
                content_type=resp.headers.get("content-type", ""),
                body=body,
            )

    async def _get_probe_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._probe_session:
            if (
                self._probe_session.closed
                or not self._probe_loop
                or self._probe_loop.is_closed()
                or self._probe_loop is not current_loop
            ):
                await self._shutdown_probe_session()
                self._probe_lock = None

        if self._probe_lock is None:
            self._probe_lock = asyncio.Lock()

        async with self._probe_lock:
            if self._probe_session and not self._probe_session.closed:
                return self._probe_session
            connector = aiohttp.TCPConnector(limit=0)
            self._probe_session = aiohttp.ClientSession(
                connector=connector,
                headers=DEFAULT_HEADERS.copy(),
            )
            self._probe_loop = current_loop
        return self._probe_session

    async def _shutdown_probe_session(self) -> None:
        if self._probe_session:
            try:
                await self._probe_session.close()
            except (aiohttp.ClientError, RuntimeError) as exc:
                logging.debug("Ignoring error while closing probe session: %s", exc)
        self._probe_session = None
        self._probe_loop = None

    async def aclose(self) -> None:
        await self._shutdown_probe_session()
        self._session.close()

    def close(self) -> None:
        """Closes the blocking session; the probe session needs :meth:`aclose`."""

        self._session.close()
        if self._probe_session and not self._probe_session.closed:
            logging.warning("Probe session still open; use 'async with HttpClient()' or aclose().")

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

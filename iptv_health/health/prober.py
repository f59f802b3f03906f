"""Lightweight reachability probe for a single channel."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict

import aiohttp

from ..models import Channel
from ..utils.http_client import HttpClient

PROBE_TIMEOUT = 5.0
PROBE_RANGE_HEADERS: Dict[str, str] = {"Range": "bytes=0-1024"}
PROBE_MAX_BYTES = 1025
HLS_MARKERS = ("#EXTM3U", "#EXT-X")


def looks_like_hls(content_type: str, *urls: str) -> bool:
    """True for an mpegurl content type or any URL (requested or redirected) naming a .m3u8."""

    return "mpegurl" in content_type.lower() or any(".m3u8" in url for url in urls)


class HealthProber:
    """Issues a range-limited GET and decides whether a stream is usable."""

    def __init__(self, http_client: HttpClient, timeout: float = PROBE_TIMEOUT) -> None:
        self._http_client = http_client
        self.timeout = timeout

    async def probe(self, channel: Channel) -> bool:
        """Returns the verdict; errors, timeouts and cancellation of the request all mean unhealthy."""

        try:
            response = await asyncio.wait_for(
                self._http_client.probe(channel.url, PROBE_RANGE_HEADERS, PROBE_MAX_BYTES),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logging.debug("Probe timed out for %s (%s)", channel.name, channel.url)
            return False
        except (aiohttp.ClientError, ValueError) as exc:
            logging.debug("Probe failed for %s: %s", channel.name, exc)
            return False

        if not response.ok:
            logging.debug("Probe for %s returned status %s", channel.name, response.status)
            return False

        if looks_like_hls(response.content_type, channel.url, response.url):
            text = response.text
            return any(marker in text for marker in HLS_MARKERS)

        return response.status in (200, 206)

"""Downloads a playlist manifest and turns it into channels."""

from __future__ import annotations

import logging
from typing import List

from ..models import Channel
from ..utils.http_client import FetchError, HttpClient
from .demo import demo_channels
from .parser import parse


class PlaylistFetcher:
    """Fetches remote playlists; any fetch failure yields the demo channels."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http_client = http_client

    async def fetch_and_parse(self, url: str) -> List[Channel]:
        try:
            text = await self._http_client.fetch_text_async(url)
        except FetchError as exc:
            logging.error("Error fetching playlist %s: %s; using demo channels", url, exc)
            return demo_channels()

        channels = parse(text)
        logging.info("Parsed %s channels from %s", len(channels), url)
        return channels

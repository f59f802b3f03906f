"""Time-bounded cache of the last parsed channel list."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..models import Channel, PlaylistCacheEntry
from ..storage.backend import KeyValueBackend

CACHE_KEY = "iptv_channels_cache_v1"
PLAYLIST_CACHE_TTL = 6 * 60 * 60


class PlaylistCache:
    """Caching is an optimization only: read or write problems never reach callers."""

    def __init__(
        self,
        backend: KeyValueBackend,
        clock: Callable[[], float] = time.time,
        ttl: float = PLAYLIST_CACHE_TTL,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self.ttl = ttl

    def get(self) -> Optional[List[Channel]]:
        try:
            raw = self._backend.get(CACHE_KEY)
        except (OSError, ValueError) as exc:
            logging.warning("Failed to read playlist cache: %s", exc)
            return None
        if not raw:
            return None

        try:
            entry = PlaylistCacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            logging.warning("Ignoring unreadable playlist cache: %s", exc)
            return None

        age = self._clock() - entry.timestamp
        if age >= self.ttl:
            logging.debug("Playlist cache expired (%.0fs old)", age)
            return None
        return entry.channels

    def put(self, channels: List[Channel]) -> None:
        entry = PlaylistCacheEntry(channels=list(channels), timestamp=self._clock())
        try:
            self._backend.set(CACHE_KEY, entry.model_dump_json())
        except OSError as exc:
            logging.error("Failed to cache channels: %s", exc)
            return
        logging.debug("Cached %s channels", len(channels))

    def clear(self) -> None:
        try:
            self._backend.delete(CACHE_KEY)
        except OSError as exc:
            logging.error("Failed to clear playlist cache: %s", exc)

"""Facade that wires playlist ingestion, health tracking, and user data together."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional, Sequence, Set

from .health import HealthBatchOrchestrator, HealthFilter, HealthPolicy, HealthProber, HealthRecordStore
from .health.orchestrator import BATCH_PAUSE, DEFAULT_BATCH_SIZE, ChannelProber, HealthUpdateCallback
from .models import Channel
from .playlist import PlaylistCache, PlaylistFetcher
from .playlist.demo import is_demo_set
from .storage import KeyValueBackend, UserDataStore
from .utils.http_client import HttpClient


class ChannelService:
    """Entry point for the display layer.

    Every store shares one backend and one clock so tests can substitute both.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        http_client: HttpClient,
        clock: Callable[[], float] = time.time,
        policy: HealthPolicy = HealthPolicy.OPTIMISTIC,
        prober: Optional[ChannelProber] = None,
        batch_pause: float = BATCH_PAUSE,
    ) -> None:
        self.playlist_cache = PlaylistCache(backend, clock)
        self.health_store = HealthRecordStore(backend, clock)
        self.user_data = UserDataStore(backend, clock)
        self.health_filter = HealthFilter(self.health_store, policy)
        self._fetcher = PlaylistFetcher(http_client)
        self._orchestrator = HealthBatchOrchestrator(
            self.health_store,
            prober or HealthProber(http_client),
            pause=batch_pause,
        )
        self._listeners: List[HealthUpdateCallback] = []

    # Playlist
    async def fetch_and_parse(self, url: str) -> List[Channel]:
        return await self._fetcher.fetch_and_parse(url)

    def get_cached_channels(self) -> Optional[List[Channel]]:
        return self.playlist_cache.get()

    def cache_channels(self, channels: Sequence[Channel]) -> None:
        self.playlist_cache.put(list(channels))

    async def load_channels(self, url: str, use_cache: bool = True) -> List[Channel]:
        """Cached channels while valid, otherwise a fresh fetch (cached unless it is the demo set)."""

        if use_cache:
            cached = self.get_cached_channels()
            if cached:
                logging.info("Using %s cached channels", len(cached))
                return cached

        channels = await self.fetch_and_parse(url)
        if channels and not is_demo_set(channels):
            self.cache_channels(channels)
        return channels

    # Health
    def subscribe(self, listener: HealthUpdateCallback) -> Callable[[], None]:
        """Registers a listener for healthy-id updates; returns a function that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, healthy_ids: Set[str], on_update: Optional[HealthUpdateCallback]) -> None:
        if on_update is not None:
            on_update(healthy_ids)
        for listener in list(self._listeners):
            try:
                listener(set(healthy_ids))
            except Exception:
                logging.exception("Health update listener %r failed", listener)

    async def check_channels_batch(
        self,
        channels: Sequence[Channel],
        on_update: Optional[HealthUpdateCallback] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> Set[str]:
        return await self._orchestrator.check_batch(
            channels,
            lambda healthy_ids: self._publish(healthy_ids, on_update),
            batch_size,
        )

    def stop(self) -> None:
        self._orchestrator.stop()

    def filter_healthy_channels(self, channels: Iterable[Channel]) -> List[Channel]:
        return self.health_filter.filter(channels)

    # Maintenance
    def reset(self) -> None:
        """Removes cached playlists, health records, and all user data."""

        self.playlist_cache.clear()
        self.health_store.clear()
        self.user_data.clear_all_data()
        logging.info("All stored data cleared")

    @staticmethod
    def group_names(channels: Iterable[Channel]) -> List[str]:
        return sorted({channel.group or "General" for channel in channels})

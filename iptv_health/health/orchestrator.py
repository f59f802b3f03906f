"""Runs health probes over a channel set in sequential, bounded batches."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Protocol, Sequence, Set

from ..models import Channel, HealthRecord
from .store import HealthRecordStore

DEFAULT_BATCH_SIZE = 10
BATCH_PAUSE = 0.2

HealthUpdateCallback = Callable[[Set[str]], None]


class ChannelProber(Protocol):
    def probe(self, channel: Channel) -> Awaitable[bool]: ...


class HealthBatchOrchestrator:
    """Reuses fresh verdicts, probes the rest batch by batch, and reports cumulative healthy ids.

    ``on_update`` fires once before any probe (fresh verdicts only) and once after
    every batch, always with a new set. :meth:`stop` ends the runs in progress between batches.
    """

    def __init__(
        self,
        store: HealthRecordStore,
        prober: ChannelProber,
        pause: float = BATCH_PAUSE,
    ) -> None:
        self._store = store
        self._prober = prober
        self.pause = pause
        self._active_runs: List[asyncio.Event] = []
        self._last_run_stopped = False

    def stop(self) -> None:
        """Signals every run in progress; runs started afterwards are unaffected."""

        for stop_event in self._active_runs:
            stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._last_run_stopped

    def partition(
        self, channels: Sequence[Channel], records: Dict[str, HealthRecord]
    ) -> tuple[List[Channel], Set[str]]:
        """Splits ``channels`` into those needing a probe and ids already known healthy."""

        to_check: List[Channel] = []
        healthy_ids: Set[str] = set()
        seen: Set[str] = set()
        for channel in channels:
            if channel.id in seen:
                continue
            seen.add(channel.id)
            record = records.get(channel.id)
            if self._store.is_fresh(record):
                if record.healthy:
                    healthy_ids.add(channel.id)
                continue
            to_check.append(channel)
        return to_check, healthy_ids

    async def check_batch(
        self,
        channels: Sequence[Channel],
        on_update: HealthUpdateCallback,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> Set[str]:
        batch_size = max(1, int(batch_size))
        stop_event = asyncio.Event()
        self._active_runs.append(stop_event)
        try:
            return await self._run(channels, on_update, batch_size, stop_event)
        finally:
            self._active_runs.remove(stop_event)
            self._last_run_stopped = stop_event.is_set()

    async def _run(
        self,
        channels: Sequence[Channel],
        on_update: HealthUpdateCallback,
        batch_size: int,
        stop_event: asyncio.Event,
    ) -> Set[str]:
        records = self._store.load()
        to_check, healthy_ids = self.partition(channels, records)
        logging.info(
            "Health check: %s channels fresh (%s healthy), %s to probe",
            len(channels) - len(to_check),
            len(healthy_ids),
            len(to_check),
        )
        on_update(set(healthy_ids))

        for start in range(0, len(to_check), batch_size):
            if stop_event.is_set():
                logging.info("Health check stopped after %s of %s probes", start, len(to_check))
                break

            batch = to_check[start : start + batch_size]
            results = await asyncio.gather(
                *(self._prober.probe(channel) for channel in batch),
                return_exceptions=True,
            )

            checked_at = self._store.now()
            records = self._store.load()
            for channel, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logging.debug("Probe for %s raised %r", channel.id, result)
                is_healthy = result is True
                records[channel.id] = HealthRecord(healthy=is_healthy, checked_at=checked_at)
                if is_healthy:
                    healthy_ids.add(channel.id)

            self._store.save(records)
            on_update(set(healthy_ids))
            logging.debug(
                "Batch %s done: %s/%s probed, %s healthy",
                start // batch_size + 1,
                start + len(batch),
                len(to_check),
                len(healthy_ids),
            )

            if start + batch_size < len(to_check) and self.pause > 0:
                await asyncio.sleep(self.pause)

        return set(healthy_ids)


"""Per-channel health verdicts and the filter built on top of them."""

from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..models import Channel, HealthRecord
from ..storage.backend import KeyValueBackend

HEALTH_KEY = "iptv_channel_health_v2"
HEALTH_CHECK_TTL = 2 * 60 * 60

HealthRecords = Dict[str, HealthRecord]


class HealthRecordStore:
    """Persisted mapping of channel id to its last :class:`HealthRecord`."""

    def __init__(
        self,
        backend: KeyValueBackend,
        clock: Callable[[], float] = time.time,
        ttl: float = HEALTH_CHECK_TTL,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self.ttl = ttl

    def now(self) -> float:
        return self._clock()

    def load(self) -> HealthRecords:
        try:
            raw = self._backend.get(HEALTH_KEY)
            data = json.loads(raw) if raw else {}
        except (OSError, ValueError) as exc:
            logging.warning("Failed to read health records: %s", exc)
            return {}
        if not isinstance(data, dict):
            return {}

        records: HealthRecords = {}
        for channel_id, value in data.items():
            try:
                records[channel_id] = HealthRecord.model_validate(value)
            except ValidationError:
                logging.debug("Dropping malformed health record for %s", channel_id)
        return records

    def save(self, records: HealthRecords) -> None:
        payload = {channel_id: record.model_dump(by_alias=True) for channel_id, record in records.items()}
        try:
            self._backend.set(HEALTH_KEY, json.dumps(payload))
        except OSError as exc:
            logging.error("Failed to save health records: %s", exc)

    def is_fresh(self, record: Optional[HealthRecord]) -> bool:
        return record is not None and self._clock() - record.checked_at < self.ttl

    def clear(self) -> None:
        try:
            self._backend.delete(HEALTH_KEY)
        except OSError as exc:
            logging.error("Failed to clear health records: %s", exc)


class HealthPolicy(str, Enum):
    """How channels without a fresh verdict are treated."""

    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"


class HealthFilter:
    """Keeps channels whose fresh verdict is healthy.

    Unknown or stale channels are kept under ``OPTIMISTIC`` (a background check
    will settle them) and dropped under ``PESSIMISTIC``.
    """

    def __init__(self, store: HealthRecordStore, policy: HealthPolicy = HealthPolicy.OPTIMISTIC) -> None:
        self._store = store
        self.policy = HealthPolicy(policy)

    def filter(self, channels: Iterable[Channel]) -> List[Channel]:
        records = self._store.load()
        keep_unknown = self.policy is HealthPolicy.OPTIMISTIC
        result = []
        for channel in channels:
            record = records.get(channel.id)
            if not self._store.is_fresh(record):
                if keep_unknown:
                    result.append(channel)
                continue
            if record.healthy:
                result.append(channel)
        return result

"""Shared fakes: a settable clock, a scripted prober, and a failing backend."""

import asyncio
from pathlib import Path
import sys

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = TESTS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from iptv_health.models import Channel
from iptv_health.utils.identity import channel_id

HOUR = 60 * 60


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeProber:
    """Returns scripted verdicts per URL; an Exception value is raised instead."""

    def __init__(self, verdicts=None, default=True, delay=0.0):
        self.verdicts = dict(verdicts or {})
        self.default = default
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def probe(self, channel):
        self.calls.append(channel.id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            verdict = self.verdicts.get(channel.url, self.default)
            if isinstance(verdict, Exception):
                raise verdict
            return verdict
        finally:
            self.in_flight -= 1


class BrokenBackend:
    """Backend whose every operation fails like a full or read-only disk."""

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def delete(self, key):
        raise OSError("read-only")


def make_channel(name, url=None, group="General"):
    url = url or f"http://streams.test/{name.lower().replace(' ', '-')}.m3u8"
    return Channel(id=channel_id(name, url), name=name, url=url, group=group)


def make_channels(count, prefix="Channel"):
    return [make_channel(f"{prefix} {index}") for index in range(count)]

import json
import os
import tempfile
import unittest

from fakes import HOUR, BrokenBackend, FakeClock, make_channels

from iptv_health.playlist import PlaylistCache
from iptv_health.playlist.cache import CACHE_KEY
from iptv_health.storage import FileBackend, MemoryBackend


class PlaylistCacheTests(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryBackend()
        self.clock = FakeClock()
        self.cache = PlaylistCache(self.backend, self.clock)
        self.channels = make_channels(3)

    def test_missing_slot_is_a_miss(self):
        self.assertIsNone(self.cache.get())

    def test_entry_valid_just_before_ttl(self):
        self.cache.put(self.channels)
        self.clock.advance(5 * HOUR + 59 * 60)
        self.assertEqual(self.channels, self.cache.get())

    def test_entry_expired_just_after_ttl(self):
        self.cache.put(self.channels)
        self.clock.advance(6 * HOUR + 60)
        self.assertIsNone(self.cache.get())

    def test_entry_expired_exactly_at_ttl(self):
        self.cache.put(self.channels)
        self.clock.advance(6 * HOUR)
        self.assertIsNone(self.cache.get())

    def test_put_overwrites_previous_entry(self):
        self.cache.put(self.channels)
        self.cache.put(self.channels[:1])
        self.assertEqual(self.channels[:1], self.cache.get())

    def test_stored_shape(self):
        self.cache.put(self.channels)
        payload = json.loads(self.backend.get(CACHE_KEY))
        self.assertEqual({"channels", "timestamp"}, set(payload))
        self.assertEqual(self.clock.now, payload["timestamp"])
        self.assertEqual(self.channels[0].id, payload["channels"][0]["id"])

    def test_corrupt_slot_is_a_miss(self):
        self.backend.set(CACHE_KEY, "{not json")
        with self.assertLogs(level="WARNING"):
            self.assertIsNone(self.cache.get())
        self.backend.set(CACHE_KEY, json.dumps({"channels": [{"name": "no id"}], "timestamp": self.clock.now}))
        with self.assertLogs(level="WARNING"):
            self.assertIsNone(self.cache.get())

    def test_undecodable_cache_file_is_a_miss(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, CACHE_KEY + ".json"), "wb") as handle:
                handle.write(b"\xff\xfe\x00garbage")
            cache = PlaylistCache(FileBackend(tmp), self.clock)
            with self.assertLogs(level="WARNING"):
                self.assertIsNone(cache.get())
            cache.put(self.channels)
            self.assertEqual(self.channels, cache.get())

    def test_storage_failures_are_swallowed(self):
        cache = PlaylistCache(BrokenBackend(), self.clock)
        with self.assertLogs(level="ERROR"):
            cache.put(self.channels)
        with self.assertLogs(level="WARNING"):
            self.assertIsNone(cache.get())
        with self.assertLogs(level="ERROR"):
            cache.clear()


if __name__ == "__main__":
    unittest.main()

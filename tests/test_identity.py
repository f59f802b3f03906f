import unittest

from fakes import PROJECT_DIR  # noqa: F401  (puts the project on sys.path)

from iptv_health.utils.identity import BASE36_DIGITS, channel_id, rolling_hash


class RollingHashTests(unittest.TestCase):
    def test_matches_known_string_hashes(self):
        self.assertEqual(99162322, rolling_hash("hello"))
        self.assertEqual(-862545276, rolling_hash("Hello World"))

    def test_empty_string_hashes_to_zero(self):
        self.assertEqual(0, rolling_hash(""))

    def test_wraps_to_signed_32_bit(self):
        value = rolling_hash("x" * 500 + "http://very.long.example/stream/index.m3u8")
        self.assertGreaterEqual(value, -(2**31))
        self.assertLess(value, 2**31)

    def test_non_bmp_characters_hash_as_surrogate_pairs(self):
        # U+1F600 is the pair 0xD83D 0xDE00.
        self.assertEqual(0xD83D * 31 + 0xDE00, rolling_hash("\U0001F600"))


class ChannelIdTests(unittest.TestCase):
    def test_known_ids(self):
        self.assertEqual("212u", channel_id("a", "b"))
        self.assertEqual("mdlak6", channel_id("Channel A", "http://x/a.m3u8"))
        self.assertEqual("psr0kq", channel_id("Channel B", "http://x/b.m3u8"))

    def test_negative_hash_uses_absolute_value(self):
        self.assertEqual(-1559944106, rolling_hash("Channel B-http://x/b.m3u8"))
        self.assertEqual("psr0kq", channel_id("Channel B", "http://x/b.m3u8"))

    def test_deterministic_across_calls(self):
        first = channel_id("News 24", "http://example.com/news.m3u8")
        for _ in range(5):
            self.assertEqual(first, channel_id("News 24", "http://example.com/news.m3u8"))

    def test_output_is_non_empty_base36(self):
        for name, url in [("", ""), ("Sport", "rtmp://x/y"), ("Ünïcödé", "http://x/ü")]:
            value = channel_id(name, url)
            self.assertTrue(value)
            self.assertTrue(set(value) <= set(BASE36_DIGITS))
            self.assertLessEqual(len(value), 7)

    def test_name_and_url_are_joined_with_dash(self):
        self.assertEqual(channel_id("a-b", "c"), channel_id("a", "b-c"))


if __name__ == "__main__":
    unittest.main()

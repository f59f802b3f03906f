import os
import tempfile
import unittest

from fakes import PROJECT_DIR  # noqa: F401

from iptv_health.storage import FileBackend, MemoryBackend


class FileBackendTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.directory = os.path.join(self._tmp.name, "nested", "data")
        self.backend = FileBackend(self.directory)

    def test_set_get_delete(self):
        self.assertIsNone(self.backend.get("slot"))
        self.backend.set("slot", '{"a": 1}')
        self.assertEqual('{"a": 1}', self.backend.get("slot"))
        self.assertTrue(os.path.exists(os.path.join(self.directory, "slot.json")))
        self.backend.delete("slot")
        self.assertIsNone(self.backend.get("slot"))
        self.backend.delete("slot")

    def test_keys_are_sanitized_into_file_names(self):
        self.backend.set("../escape/key", "x")
        self.assertEqual([".._escape_key.json"], os.listdir(self.directory))
        self.assertEqual("x", self.backend.get("../escape/key"))

    def test_overwrite_leaves_no_temp_files(self):
        self.backend.set("slot", "one")
        self.backend.set("slot", "two")
        self.assertEqual("two", self.backend.get("slot"))
        self.assertEqual(["slot.json"], os.listdir(self.directory))


class MemoryBackendTests(unittest.TestCase):
    def test_slots_are_independent(self):
        backend = MemoryBackend({"a": "1"})
        backend.set("b", "2")
        backend.delete("a")
        self.assertEqual(["b"], backend.keys())
        self.assertIsNone(backend.get("a"))


if __name__ == "__main__":
    unittest.main()

"""Key-value persistence backends for cached playlists, health records, and user data."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, Optional, Protocol

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DATA_DIR = os.path.join(PROJECT_ROOT, ".cache", "iptv_health")

INVALID_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBackend:
    """In-process slots; nothing survives the interpreter."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileBackend:
    """Stores every slot as ``<directory>/<key>.json``.

    Read errors other than a missing file propagate as ``OSError``, as do write errors.
    """

    def __init__(self, directory: str = DEFAULT_DATA_DIR) -> None:
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{INVALID_KEY_CHARS.sub('_', key)}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as handle:
                return handle.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(value)
        os.replace(tmp_path, path)
        logging.debug("Wrote slot %s to %s", key, path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)
            logging.debug("Removed slot %s (%s)", key, path)

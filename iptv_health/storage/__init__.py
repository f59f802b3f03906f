"""Persistence backends and the favorites/history/preferences store."""

from .backend import DEFAULT_DATA_DIR, FileBackend, KeyValueBackend, MemoryBackend
from .user_data import UserDataStore

__all__ = ["KeyValueBackend", "MemoryBackend", "FileBackend", "DEFAULT_DATA_DIR", "UserDataStore"]

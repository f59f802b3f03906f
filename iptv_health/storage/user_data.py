"""Favorites, watch history, preferences, and playback health notes."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List

from pydantic import ValidationError

from ..models import StreamHealth, UserPreferences, WatchHistoryItem
from .backend import KeyValueBackend

FAVORITES_KEY = "iptv_favorites_v2"
WATCH_HISTORY_KEY = "iptv_watch_history_v1"
PREFERENCES_KEY = "iptv_user_preferences_v1"
STREAM_HEALTH_KEY = "iptv_stream_health_v1"

USER_DATA_KEYS = (FAVORITES_KEY, WATCH_HISTORY_KEY, PREFERENCES_KEY, STREAM_HEALTH_KEY)

MAX_WATCH_HISTORY = 50
MAX_STREAM_HEALTH = 100


class UserDataStore:
    """Reads degrade to defaults and writes are best effort; nothing here raises."""

    def __init__(self, backend: KeyValueBackend, clock: Callable[[], float] = time.time) -> None:
        self._backend = backend
        self._clock = clock

    def _read_json(self, key: str) -> Any:
        try:
            raw = self._backend.get(key)
            return json.loads(raw) if raw else None
        except (OSError, ValueError) as exc:
            logging.warning("Failed to read %s: %s", key, exc)
            return None

    def _write_json(self, key: str, value: Any) -> None:
        try:
            self._backend.set(key, json.dumps(value, ensure_ascii=False))
        except (OSError, TypeError) as exc:
            logging.error("Failed to save %s: %s", key, exc)

    # Favorites
    def get_favorites(self) -> List[str]:
        data = self._read_json(FAVORITES_KEY)
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def save_favorites(self, favorites: Iterable[str]) -> None:
        self._write_json(FAVORITES_KEY, list(dict.fromkeys(favorites)))

    def toggle_favorite(self, channel_id: str) -> bool:
        favorites = self.get_favorites()
        if channel_id in favorites:
            favorites.remove(channel_id)
            added = False
        else:
            favorites.append(channel_id)
            added = True
        self.save_favorites(favorites)
        return added

    # Watch history
    def get_watch_history(self) -> List[WatchHistoryItem]:
        data = self._read_json(WATCH_HISTORY_KEY)
        if not isinstance(data, list):
            return []
        try:
            return [WatchHistoryItem.model_validate(item) for item in data]
        except ValidationError as exc:
            logging.warning("Discarding unreadable watch history: %s", exc)
            return []

    def add_to_watch_history(self, item: WatchHistoryItem) -> None:
        history = [h for h in self.get_watch_history() if h.channel_id != item.channel_id]
        updated = [item, *history][:MAX_WATCH_HISTORY]
        self._write_json(WATCH_HISTORY_KEY, [h.model_dump() for h in updated])

    def clear_watch_history(self) -> None:
        self._delete(WATCH_HISTORY_KEY)

    # Preferences
    def get_user_preferences(self) -> UserPreferences:
        data = self._read_json(PREFERENCES_KEY)
        if not isinstance(data, dict):
            return UserPreferences()
        merged = {**UserPreferences().model_dump(), **data}
        try:
            return UserPreferences.model_validate(merged)
        except ValidationError as exc:
            logging.warning("Stored preferences are invalid, using defaults: %s", exc)
            return UserPreferences()

    def save_user_preferences(self, preferences: UserPreferences) -> None:
        self._write_json(PREFERENCES_KEY, preferences.model_dump())

    # Playback health notes
    def get_stream_health(self) -> List[StreamHealth]:
        data = self._read_json(STREAM_HEALTH_KEY)
        if not isinstance(data, list):
            return []
        try:
            return [StreamHealth.model_validate(item) for item in data]
        except ValidationError as exc:
            logging.warning("Discarding unreadable stream health notes: %s", exc)
            return []

    def update_stream_health(self, health: StreamHealth) -> None:
        others = [h for h in self.get_stream_health() if h.channel_id != health.channel_id]
        updated = [health, *others][:MAX_STREAM_HEALTH]
        self._write_json(STREAM_HEALTH_KEY, [h.model_dump() for h in updated])

    # Export / import
    def export_data(self) -> str:
        data = {
            "favorites": self.get_favorites(),
            "watch_history": [h.model_dump() for h in self.get_watch_history()],
            "preferences": self.get_user_preferences().model_dump(),
            "exported_at": datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat(),
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    def import_data(self, text: str) -> bool:
        """Restores favorites and preferences from :meth:`export_data` output."""

        try:
            data = json.loads(text)
        except ValueError as exc:
            logging.error("Import failed, not valid JSON: %s", exc)
            return False
        if not isinstance(data, dict):
            logging.error("Import failed, expected a JSON object")
            return False

        favorites = data.get("favorites")
        preferences = None
        if data.get("preferences"):
            try:
                preferences = UserPreferences.model_validate(data["preferences"])
            except ValidationError as exc:
                logging.error("Import failed, invalid preferences: %s", exc)
                return False
        if favorites is not None and not isinstance(favorites, list):
            logging.error("Import failed, favorites must be a list")
            return False

        if favorites is not None:
            self.save_favorites(str(item) for item in favorites)
        if preferences is not None:
            self.save_user_preferences(preferences)
        return True

    def clear_all_data(self) -> None:
        for key in USER_DATA_KEYS:
            self._delete(key)

    def _delete(self, key: str) -> None:
        try:
            self._backend.delete(key)
        except OSError as exc:
            logging.error("Failed to remove %s: %s", key, exc)

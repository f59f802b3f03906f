"""Data models for channels, health verdicts, and user data."""

from .channel_models import Channel, HealthRecord, PlaylistCacheEntry
from .user_models import StreamHealth, UserPreferences, WatchHistoryItem

__all__ = [
    "Channel",
    "PlaylistCacheEntry",
    "HealthRecord",
    "UserPreferences",
    "WatchHistoryItem",
    "StreamHealth",
]

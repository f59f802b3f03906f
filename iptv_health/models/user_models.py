"""Models for favorites, watch history, and viewer preferences."""

from typing import Literal

from pydantic import BaseModel, Field


class UserPreferences(BaseModel):
    """Viewer settings persisted between sessions."""

    theme: Literal["dark", "light"] = "dark"
    auto_play: bool = True
    keyboard_shortcuts: bool = True
    default_quality: Literal["auto", "1080p", "720p", "480p"] = "auto"
    volume: float = Field(default=1.0, ge=0.0, le=1.0)


class WatchHistoryItem(BaseModel):
    channel_id: str
    channel_name: str
    timestamp: float
    duration: float = 0.0
    logo: str = ""


class StreamHealth(BaseModel):
    """Playback-side health note for a channel (errors seen while watching)."""

    channel_id: str
    is_healthy: bool
    last_checked: float
    error_count: int = 0

"""Pydantic models that describe channels and their cached state."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_CHANNEL_NAME = "Unknown Channel"
DEFAULT_GROUP = "General"


class Channel(BaseModel):
    """One playable stream taken from a playlist manifest."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    logo: str = ""
    group: str = DEFAULT_GROUP
    language: str = ""
    country: str = ""


class PlaylistCacheEntry(BaseModel):
    """Channel list captured at ``timestamp`` (epoch seconds)."""

    channels: List[Channel]
    timestamp: float


class HealthRecord(BaseModel):
    """Last probe verdict for a channel id."""

    model_config = ConfigDict(populate_by_name=True)

    healthy: bool
    checked_at: float = Field(alias="checkedAt")

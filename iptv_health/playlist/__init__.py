"""Playlist ingestion: parsing, fetching, and caching."""

from .cache import PlaylistCache
from .demo import demo_channels
from .fetcher import PlaylistFetcher
from .parser import parse, parse_extinf, parse_playlist

__all__ = ["parse", "parse_playlist", "parse_extinf", "demo_channels", "PlaylistFetcher", "PlaylistCache"]

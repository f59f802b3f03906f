"""Utility helpers for HTTP access and channel identity."""

from .http_client import FetchError, HttpClient, ProbeResponse
from .identity import channel_id

__all__ = ["HttpClient", "FetchError", "ProbeResponse", "channel_id"]

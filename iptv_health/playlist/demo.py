"""Built-in sample channels used when no playlist could be loaded."""

from __future__ import annotations

from typing import List

from ..models import Channel

DEMO_GROUP = "Demo"

_DEMO_CHANNELS = (
    {
        "id": "demo1",
        "name": "Big Buck Bunny",
        "url": "https://test-streams.mux.dev/x36xhzz/x36xhzz.m3u8",
        "logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/c/c5/Big_buck_bunny_poster_big.jpg/220px-Big_buck_bunny_poster_big.jpg",
    },
    {
        "id": "demo2",
        "name": "Sintel",
        "url": "https://bitdash-a.akamaihd.net/content/sintel/hls/playlist.m3u8",
        "logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/e/e0/Sintel.jpg/220px-Sintel.jpg",
    },
    {
        "id": "demo3",
        "name": "Tears of Steel",
        "url": "https://demo.unified-streaming.com/k8s/features/stable/video/tears-of-steel/tears-of-steel.ism/.m3u8",
        "logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/2/21/Tos-poster.png/220px-Tos-poster.png",
    },
)


def demo_channels() -> List[Channel]:
    return [Channel(group=DEMO_GROUP, language="English", **entry) for entry in _DEMO_CHANNELS]


def is_demo_set(channels: List[Channel]) -> bool:
    return [ch.id for ch in channels] == [entry["id"] for entry in _DEMO_CHANNELS]

"""Streaming parser for #EXTINF playlist manifests."""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from ..models import Channel
from ..models.channel_models import DEFAULT_GROUP, UNKNOWN_CHANNEL_NAME
from ..utils.identity import channel_id
from .demo import demo_channels

EXTINF_PREFIX = "#EXTINF:"
LINE_STRIP_CHARS = " \t\r"

LOGO_RE = re.compile(r'tvg-logo="([^"]*)"')
GROUP_RE = re.compile(r'group-title="([^"]*)"')
LANGUAGE_RE = re.compile(r'tvg-language="([^"]*)"')
COUNTRY_RE = re.compile(r'tvg-country="([^"]*)"')
NAME_RE = re.compile(r",([^,]+)$")


def _first_group(pattern: re.Pattern, line: str) -> str:
    match = pattern.search(line)
    return match.group(1) if match else ""


def extract_logo(line: str) -> str:
    return _first_group(LOGO_RE, line)


def extract_group(line: str) -> str:
    return _first_group(GROUP_RE, line) or DEFAULT_GROUP


def extract_language(line: str) -> str:
    return _first_group(LANGUAGE_RE, line)


def extract_country(line: str) -> str:
    return _first_group(COUNTRY_RE, line)


def extract_name(line: str) -> str:
    """Text after the last comma, or the unknown-channel placeholder."""

    return _first_group(NAME_RE, line).strip() or UNKNOWN_CHANNEL_NAME


def parse_extinf(line: str) -> Dict[str, str]:
    """Extracts every known attribute from one #EXTINF line; each field defaults on its own."""

    return {
        "name": extract_name(line),
        "logo": extract_logo(line),
        "group": extract_group(line),
        "language": extract_language(line),
        "country": extract_country(line),
    }


def iter_lines(content: str) -> Iterator[str]:
    """Yields trimmed, non-empty lines by scanning for line breaks in place."""

    pos = 0
    length = len(content)
    while pos < length:
        eol = content.find("\n", pos)
        if eol == -1:
            eol = length
        line = content[pos:eol].strip(LINE_STRIP_CHARS)
        pos = eol + 1
        if line:
            yield line


def parse_playlist(content: str) -> List[Channel]:
    """Converts manifest text into channels; never raises and may return an empty list.

    Channels sharing an id keep the first one's position and the last one's data.
    """

    channels: Dict[str, Channel] = {}
    pending: Optional[Dict[str, str]] = None

    for line in iter_lines(content):
        if line.startswith("#"):
            if line.startswith(EXTINF_PREFIX):
                pending = parse_extinf(line)
            continue
        if pending is None:
            continue
        channel = Channel(id=channel_id(pending["name"], line), url=line, **pending)
        channels[channel.id] = channel
        pending = None

    return list(channels.values())


def parse(content: str) -> List[Channel]:
    """Like :func:`parse_playlist`, but falls back to the demo channels when nothing parsed."""

    channels = parse_playlist(content)
    return channels if channels else demo_channels()

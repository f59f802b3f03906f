"""Deterministic channel identity derived from a name and stream URL."""

from __future__ import annotations

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def rolling_hash(text: str) -> int:
    """32-bit signed ``h = h * 31 + unit`` over the UTF-16 code units of ``text``."""

    data = text.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for offset in range(0, len(data), 2):
        unit = data[offset] | (data[offset + 1] << 8)
        h = (h * 31 + unit) & _INT32_MASK
    if h & _INT32_SIGN:
        h -= 1 << 32
    return h


def channel_id(name: str, url: str) -> str:
    """Returns the base-36 id for a (name, url) pair.

    Distinct pairs can collide; callers keep the last channel seen for an id.
    """

    return _to_base36(abs(rolling_hash(f"{name}-{url}")))

"""
Duration strings such as "10m" or "7d".
"""

import re
from datetime import timedelta

DEFAULT_DURATION_MS = 10 * 60 * 1000

_UNITS_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")


def parse_duration_ms(value: str) -> int:
    """
    Convert a duration string to milliseconds.

    Accepts a positive integer followed by one of s, m, h, d.
    Anything else falls back to 10 minutes instead of failing.
    """
    match = _DURATION_RE.match(value) if isinstance(value, str) else None
    if match is None:
        return DEFAULT_DURATION_MS
    return int(match.group(1)) * _UNITS_MS[match.group(2)]


def parse_duration(value: str) -> timedelta:
    return timedelta(milliseconds=parse_duration_ms(value))

"""Defensive coercion of raw user input.

Every helper here degrades to a neutral value instead of raising: the
calculators must produce a result for any snapshot the user can type.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from typing import Any

_RESET_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_number(value: Any) -> float:
    """Coerce *value* to a float; anything non-numeric becomes 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def align(dt: datetime, now: datetime) -> datetime:
    """Make *dt* comparable with *now* (both naive or both aware)."""
    if now.tzinfo is None and dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    if now.tzinfo is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=now.tzinfo)
    return dt


def parse_reset_time(value: Any, now: datetime) -> datetime | None:
    """Parse an ``HH:MM`` string onto the calendar day of *now*.

    Seconds and microseconds are zeroed. Returns None when unparseable.
    """
    if not isinstance(value, str):
        return None
    m = _RESET_TIME_RE.match(value.strip())
    if m is None:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return now.replace(hour=hour, minute=minute, second=0, microsecond=0)


def parse_datetime(value: Any, now: datetime) -> datetime | None:
    """Parse a datetime or ISO 8601 string; None if missing or invalid."""
    if isinstance(value, datetime):
        return align(value, now)
    if isinstance(value, date):
        return align(datetime.combine(value, time()), now)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return align(parsed, now)


def parse_date(value: Any, now: datetime) -> datetime | None:
    """Parse a calendar date into midnight of that day; None if invalid."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return align(datetime.combine(value, time()), now)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
    return align(datetime.combine(parsed, time()), now)

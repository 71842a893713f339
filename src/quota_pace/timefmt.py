"""Human-readable formatting of durations and instants."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

# Fixed English abbreviations so output does not depend on the locale
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_duration(ms: float) -> str:
    """Render a millisecond span as ``"<H>h <M>m"``; negatives render as zero."""
    if ms < 0:
        return "0h 0m"
    total_minutes = math.floor(ms / 60_000)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def format_time(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def format_relative_time(dt: datetime, relative_to: datetime | None = None) -> str:
    """Format *dt* relative to the calendar day of *relative_to*.

    Same day gives ``HH:MM``, adjacent days get a ``Tomorrow``/``Yesterday``
    prefix, anything else is ``D Mon HH:MM``.
    """
    if relative_to is None:
        relative_to = datetime.now(dt.tzinfo)
    day = dt.date()
    ref = relative_to.date()
    if day == ref:
        return format_time(dt)
    if day == ref + timedelta(days=1):
        return f"Tomorrow {format_time(dt)}"
    if day == ref - timedelta(days=1):
        return f"Yesterday {format_time(dt)}"
    return f"{dt.day} {_MONTHS[dt.month - 1]} {format_time(dt)}"


def format_date_time(dt: datetime) -> str:
    """``Mon D HH:MM``, e.g. ``Oct 16 15:00``."""
    return f"{_MONTHS[dt.month - 1]} {dt.day} {format_time(dt)}"


def format_date(dt: datetime) -> str:
    """``Mon D, YYYY``, e.g. ``Nov 1, 2026``."""
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}"

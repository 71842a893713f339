"""Effective "now": the only place the wall clock is read.

The calculators take the instant as an argument; this module turns the
system time into the instant they should see, honouring the configured
clock mode and manual hour offset.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from quota_pace import config, constants
from quota_pace.quota.inputs import clamp, to_number

MAX_OFFSET_HOURS = 24


def effective_now(
    system_time: datetime | None = None,
    time_mode: str = constants.DEFAULT_TIME_MODE,
    hour_offset: float = 0,
) -> datetime:
    """Return the naive wall-clock instant used for all calculations.

    In ``utc`` mode the result is UTC wall-clock time, in ``local`` mode it
    is local wall-clock time. *hour_offset* hours are added afterwards.
    Naive *system_time* values are taken to be local time.
    """
    if time_mode not in constants.TIME_MODES:
        raise ValueError(f"Unknown time mode {time_mode!r}; expected one of {constants.TIME_MODES}")

    if system_time is None:
        system_time = datetime.now().astimezone()

    if time_mode == "utc":
        now = system_time.astimezone(timezone.utc).replace(tzinfo=None)
    elif system_time.tzinfo is not None:
        now = system_time.astimezone().replace(tzinfo=None)
    else:
        now = system_time

    if hour_offset:
        now += timedelta(hours=hour_offset)
    return now


def clock_settings() -> tuple[str, float]:
    """Return the configured ``(time_mode, hour_offset)``."""
    cfg = config.load_config().get("clock", {})
    mode = cfg.get("time_mode", constants.DEFAULT_TIME_MODE)
    if mode not in constants.TIME_MODES:
        mode = constants.DEFAULT_TIME_MODE
    offset = clamp(to_number(cfg.get("hour_offset", 0)), -MAX_OFFSET_HOURS, MAX_OFFSET_HOURS)
    return mode, offset

"""Short (session) window: a rolling N-hour window ending at a daily reset.

The window always refers to the *next* occurring reset. With a reset time
of 15:00 and a 5 hour window, at 16:00 the window is tomorrow 10:00-15:00
and is reported as inactive until it starts.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from quota_pace import constants
from quota_pace.models import CalculationResult, QuotaState, Status
from quota_pace.quota.inputs import clamp, parse_reset_time, to_number

_HOUR = timedelta(hours=1)
_MILLISECOND = timedelta(milliseconds=1)


def resolve_reset(now: datetime, reset_time: str) -> datetime:
    """Return the next reset instant strictly after *now*."""
    reset = parse_reset_time(reset_time, now)
    if reset is None:
        reset = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if reset <= now:
        reset += timedelta(days=1)
    return reset


def session_status(
    percent_used: float, time_progress_pct: float, forecast_pct: float
) -> Status:
    """Classify usage against elapsed time.

    Later rules override earlier ones; the forecast rule always wins.
    """
    deviation = percent_used - time_progress_pct
    status = Status.OK
    if deviation > constants.SESSION_WARNING_DEVIATION:
        status = Status.WARNING
    if deviation > constants.SESSION_CRITICAL_DEVIATION:
        status = Status.CRITICAL
    if forecast_pct > constants.SESSION_CRITICAL_FORECAST:
        status = Status.CRITICAL
    return status


def calculate_quota_stats(now: datetime, state: QuotaState) -> CalculationResult:
    """Compute pace, forecast and status for the short window."""
    percent_used = clamp(to_number(state.percent_used), 0.0, 100.0)
    window_hours = to_number(state.window_length_hours)
    if window_hours <= 0:
        window_hours = float(constants.FALLBACK_WINDOW_HOURS)
    window_hours = min(window_hours, float(constants.MAX_WINDOW_HOURS))

    window_end = resolve_reset(now, state.reset_time)
    window_start = window_end - timedelta(hours=window_hours)

    elapsed = now - window_start
    elapsed_hours = elapsed / _HOUR
    is_window_active = elapsed >= timedelta(0)

    rate_per_hour = percent_used / elapsed_hours if elapsed_hours > 0 else 0.0
    safe_rate_per_hour = 100 / window_hours
    forecast_percent = rate_per_hour * window_hours

    estimated_finish: datetime | None = None
    if rate_per_hour > 0:
        try:
            estimated_finish = window_start + timedelta(hours=100 / rate_per_hour)
        except OverflowError:
            # pace too slow to ever finish within representable time
            estimated_finish = None

    time_progress = clamp(elapsed_hours / window_hours * 100, 0.0, 100.0)

    return CalculationResult(
        window_start=window_start,
        window_end=window_end,
        elapsed_ms=elapsed / _MILLISECOND,
        rate_per_hour=rate_per_hour,
        safe_rate_per_hour=safe_rate_per_hour,
        forecast_percent=forecast_percent,
        remaining_percent=clamp(100 - percent_used, 0.0, 100.0),
        estimated_finish_date=estimated_finish,
        time_progress_percent=time_progress,
        status=session_status(percent_used, time_progress, forecast_percent),
        is_window_active=is_window_active,
        percent_used=percent_used,
    )

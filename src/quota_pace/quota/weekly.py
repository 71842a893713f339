"""Weekly window: a fixed 7-day window ending at the configured reset.

Usage is benchmarked against an even spend over *work days* rather than
all seven calendar days, so the benchmark reaches 100% once that many days
have elapsed.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import datetime, timedelta

from quota_pace import constants
from quota_pace.models import QuotaState, Status, WeeklyCalculationResult
from quota_pace.quota.inputs import clamp, parse_datetime, to_number

_DAY = timedelta(days=1)
_HOUR = timedelta(hours=1)


def coerce_work_days(value: object) -> int:
    """Coerce a work-day count into [1, 7]; unusable input defaults to 5."""
    number = to_number(value)
    if not number:
        number = constants.DEFAULT_WORK_DAYS
    return int(clamp(int(number), constants.MIN_WORK_DAYS, constants.MAX_WORK_DAYS))


def weekly_status(percent_used: float, benchmark_pct: float, daily_pace: float, max_safe_pace: float) -> Status:
    deviation = percent_used - benchmark_pct
    if deviation > constants.WEEKLY_CRITICAL_DEVIATION:
        return Status.CRITICAL
    if deviation > constants.WEEKLY_WARNING_DEVIATION:
        return Status.WARNING
    if daily_pace > max_safe_pace * constants.WEEKLY_PACE_TOLERANCE:
        return Status.WARNING
    return Status.OK


def calculate_weekly_stats(now: datetime, state: QuotaState) -> WeeklyCalculationResult:
    """Compute benchmark, pace and status for the weekly window."""
    percent_used = clamp(to_number(state.weekly_percent_used), 0.0, 100.0)
    work_days = coerce_work_days(state.weekly_work_days)

    reset_date = parse_datetime(state.weekly_reset_date, now)
    if reset_date is None:
        reset_date = now + timedelta(days=constants.WEEK_DAYS)
    try:
        start_date = reset_date - timedelta(days=constants.WEEK_DAYS)
    except OverflowError:
        reset_date = now + timedelta(days=constants.WEEK_DAYS)
        start_date = now

    total = reset_date - start_date
    elapsed = now - start_date
    elapsed_days = elapsed / _DAY

    time_progress = clamp(elapsed / total * 100, 0.0, 100.0)
    benchmark = clamp(elapsed_days * (100 / work_days), 0.0, 100.0)
    current_daily_pace = percent_used / elapsed_days if elapsed_days > 0 else 0.0
    max_safe_daily_pace = 100 / work_days

    remaining = reset_date - now
    if remaining > timedelta(0):
        days_remaining = math.floor(remaining / _DAY)
        hours_remaining = math.floor((remaining % _DAY) / _HOUR)
    else:
        days_remaining = hours_remaining = 0

    return WeeklyCalculationResult(
        start_date=start_date,
        reset_date=reset_date,
        percent_used=percent_used,
        time_progress_percent=time_progress,
        benchmark_percent=benchmark,
        status=weekly_status(percent_used, benchmark, current_daily_pace, max_safe_daily_pace),
        days_remaining=days_remaining,
        hours_remaining=hours_remaining,
        current_daily_pace=current_daily_pace,
        max_safe_daily_pace=max_safe_daily_pace,
        work_days=work_days,
    )


def calculate_sonnet_stats(now: datetime, state: QuotaState) -> WeeklyCalculationResult:
    """Weekly stats for the Sonnet-only sub-quota.

    Same algorithm with the Sonnet percentage, and the Sonnet reset date
    when one is set.
    """
    sonnet = dataclasses.replace(
        state,
        weekly_percent_used=state.weekly_sonnet_percent_used or 0,
        weekly_reset_date=state.weekly_sonnet_reset_date or state.weekly_reset_date,
    )
    return calculate_weekly_stats(now, sonnet)

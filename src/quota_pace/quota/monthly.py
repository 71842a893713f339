"""Monthly billing cycle anchored to the last payment date."""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

from quota_pace.models import MonthlyCalculationResult
from quota_pace.quota.inputs import clamp, parse_date

_DAY = timedelta(days=1)


def add_months(dt: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length.

    >>> add_months(datetime(2024, 1, 31), 1)
    datetime.datetime(2024, 2, 29, 0, 0)
    """
    index = dt.month - 1 + months
    year = dt.year + index // 12
    month = index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def _whole_days(delta: timedelta) -> int:
    # truncates toward zero, so a cycle 1.5 days overdue reports -1
    return int(delta / _DAY)


def calculate_monthly_progress(now: datetime, last_payment_date: object) -> MonthlyCalculationResult:
    """Progress through the billing cycle that started at *last_payment_date*.

    The cycle is not advanced when *now* is past the next payment: the
    result then shows 100% progress and a negative ``days_remaining``.
    """
    last_payment = parse_date(last_payment_date, now)
    if last_payment is None:
        last_payment = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    next_payment = add_months(last_payment, 1)
    total = next_payment - last_payment
    elapsed = now - last_payment

    return MonthlyCalculationResult(
        progress_percent=clamp(elapsed / total * 100, 0.0, 100.0),
        next_billing_date=next_payment,
        days_remaining=_whole_days(next_payment - now),
        total_days_in_cycle=_whole_days(total),
    )

"""Text rendering of the session, weekly and billing cards."""

from __future__ import annotations

from datetime import datetime, timedelta

import click

from quota_pace import constants
from quota_pace.models import (
    CalculationResult,
    MonthlyCalculationResult,
    QuotaState,
    Status,
    WeeklyCalculationResult,
)
from quota_pace.quota.monthly import calculate_monthly_progress
from quota_pace.quota.session import calculate_quota_stats
from quota_pace.quota.weekly import calculate_sonnet_stats, calculate_weekly_stats
from quota_pace.timefmt import format_date, format_date_time, format_duration, format_relative_time

_RULE = "=" * 60
_INDENT = " " * 13

_STATUS_COLORS = {
    Status.OK: "green",
    Status.WARNING: "yellow",
    Status.CRITICAL: "red",
}


def _bar(percent: float, width: int) -> str:
    filled = round(min(max(percent, 0.0), 100.0) / 100 * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def _status(status: Status) -> str:
    return click.style(status.value.upper(), fg=_STATUS_COLORS[status], bold=True)


def render_session(now: datetime, stats: CalculationResult, width: int = constants.BAR_WIDTH) -> list[str]:
    lines = ["Current Session", _RULE]
    if not stats.is_window_active:
        lines.append(
            f"Window inactive: next window starts {format_relative_time(stats.window_start, now)}."
        )
        lines.append("Check the clock mode/offset (quota-pace clock) or the reset time.")

    start = format_relative_time(stats.window_start, now)
    end = format_relative_time(stats.window_end, now)
    lines.append(f"{'Window:':<13}{start} - {end}")
    lines.append(f"{'Status:':<13}{_status(stats.status)}")
    lines.append(f"{'Used:':<13}{_bar(stats.percent_used, width)} {stats.percent_used:5.1f}%")
    lines.append(f"{'Time:':<13}{_bar(stats.time_progress_percent, width)} {stats.time_progress_percent:5.1f}%")

    deviation = stats.percent_used - stats.time_progress_percent
    if deviation > 0:
        lines.append(f"{_INDENT}+{deviation:.1f}% over budget")
    else:
        lines.append(f"{_INDENT}{abs(deviation):.1f}% under budget")

    lines.append(
        f"{'Rate:':<13}{stats.rate_per_hour:.1f}% / h (max safe {stats.safe_rate_per_hour:.1f}% / h)"
    )
    lines.append(f"{'Forecast:':<13}{stats.forecast_percent:.0f}% at window end")
    finish = stats.estimated_finish_date
    lines.append(f"{'Hits 100%:':<13}{format_relative_time(finish, now) if finish else '--:--'}")
    to_reset = (stats.window_end - now) / timedelta(milliseconds=1)
    lines.append(f"{'Resets in:':<13}{format_duration(max(0.0, to_reset))}")
    return lines


def render_weekly(title: str, stats: WeeklyCalculationResult, width: int = constants.BAR_WIDTH) -> list[str]:
    lines = [title, _RULE]
    lines.append(f"{'Window:':<13}{format_date_time(stats.start_date)} - {format_date_time(stats.reset_date)}")
    lines.append(f"{'Status:':<13}{_status(stats.status)}")
    lines.append(f"{'Used:':<13}{_bar(stats.percent_used, width)} {stats.percent_used:5.1f}%")
    lines.append(f"{'Benchmark:':<13}{_bar(stats.benchmark_percent, width)} {stats.benchmark_percent:5.1f}%")

    deviation = stats.percent_used - stats.benchmark_percent
    if deviation > 0:
        lines.append(f"{_INDENT}+{deviation:.1f}% ahead of schedule")
    else:
        lines.append(f"{_INDENT}{abs(deviation):.1f}% safe buffer")

    lines.append(
        f"{'Pace:':<13}{stats.current_daily_pace:.1f}% / day "
        f"(max safe {stats.max_safe_daily_pace:.1f}% / day over {stats.work_days} work days)"
    )
    lines.append(f"{'Resets in:':<13}{stats.days_remaining}d {stats.hours_remaining}h")
    return lines


def render_monthly(stats: MonthlyCalculationResult, width: int = constants.BAR_WIDTH) -> list[str]:
    lines = ["Billing Cycle", _RULE]
    lines.append(f"{'Cycle:':<13}{_bar(stats.progress_percent, width)} {stats.progress_percent:5.1f}%")
    lines.append(f"{'Next bill:':<13}{format_date(stats.next_billing_date)}")
    lines.append(f"{'Days left:':<13}{stats.days_remaining} of {stats.total_days_in_cycle}")
    return lines


def render_dashboard(
    now: datetime,
    state: QuotaState,
    time_mode: str = constants.DEFAULT_TIME_MODE,
    hour_offset: float = 0,
    width: int = constants.BAR_WIDTH,
) -> str:
    """Render every card for *state* as seen at *now*."""
    clock = time_mode.upper()
    if hour_offset:
        clock += f" {hour_offset:+g}h"
    sections = [
        [f"Usage Tracker  {now.strftime('%H:%M:%S')}  ({clock} time)"],
        render_session(now, calculate_quota_stats(now, state), width),
        render_weekly("Current Week (All)", calculate_weekly_stats(now, state), width),
        render_weekly("Current Week (Sonnet)", calculate_sonnet_stats(now, state), width),
    ]
    if state.last_payment_date:
        sections.append(render_monthly(calculate_monthly_progress(now, state.last_payment_date), width))
    return "\n\n".join("\n".join(lines) for lines in sections)


def show_dashboard(
    now: datetime,
    state: QuotaState,
    time_mode: str = constants.DEFAULT_TIME_MODE,
    hour_offset: float = 0,
    width: int = constants.BAR_WIDTH,
) -> None:
    click.echo(render_dashboard(now, state, time_mode, hour_offset, width))

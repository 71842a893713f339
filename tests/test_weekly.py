"""Tests for quota/weekly.py (7-day window and Sonnet sub-quota)."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from quota_pace.models import Status
from quota_pace.quota.weekly import (
    calculate_sonnet_stats,
    calculate_weekly_stats,
    coerce_work_days,
    weekly_status,
)


class TestCoerceWorkDays:
    @pytest.mark.parametrize("value, expected", [
        (5, 5),
        ("3", 3),
        (7, 7),
        ("9", 7),
        (-3, 1),
        (0, 5),
        ("0", 5),
        ("", 5),
        ("abc", 5),
        (None, 5),
        ("4.7", 4),
    ])
    def test_values(self, value, expected):
        assert coerce_work_days(value) == expected


class TestWeeklyStatus:
    def test_on_benchmark_is_ok(self):
        assert weekly_status(60.0, 60.0, 20.0, 20.0) == Status.OK

    def test_more_than_five_ahead_is_warning(self):
        assert weekly_status(65.5, 60.0, 21.0, 20.0) == Status.WARNING

    def test_exactly_fifteen_ahead_is_warning(self):
        assert weekly_status(75.0, 60.0, 25.0, 20.0) == Status.WARNING

    def test_more_than_fifteen_ahead_is_critical(self):
        assert weekly_status(75.5, 60.0, 25.0, 20.0) == Status.CRITICAL

    def test_fast_pace_is_warning(self):
        assert weekly_status(24.5, 20.0, 24.5, 20.0) == Status.WARNING

    def test_pace_at_tolerance_is_ok(self):
        assert weekly_status(24.0, 20.0, 24.0, 20.0) == Status.OK


class TestCalculateWeeklyStats:
    def test_three_days_into_week(self, now, state):
        stats = calculate_weekly_stats(now, state)
        assert stats.start_date == datetime(2026, 10, 13, 12, 0)
        assert stats.reset_date == datetime(2026, 10, 20, 12, 0)
        assert stats.time_progress_percent == pytest.approx(300 / 7)
        assert stats.benchmark_percent == pytest.approx(60.0)
        assert stats.current_daily_pace == pytest.approx(20.0)
        assert stats.max_safe_daily_pace == pytest.approx(20.0)
        assert stats.work_days == 5
        assert stats.days_remaining == 4
        assert stats.hours_remaining == 0
        assert stats.status == Status.OK

    def test_ahead_of_benchmark(self, now, state):
        assert calculate_weekly_stats(now, replace(state, weekly_percent_used=70)).status == Status.WARNING
        assert calculate_weekly_stats(now, replace(state, weekly_percent_used=80)).status == Status.CRITICAL

    def test_pace_warning_early_in_week(self, now, state):
        # One day in: benchmark 20%, 24.5% used is within 5 points but the
        # daily pace exceeds 1.2 × the 20%/day safe pace.
        s = replace(state, weekly_percent_used=24.5, weekly_reset_date="2026-10-22T12:00")
        stats = calculate_weekly_stats(now, s)
        assert stats.benchmark_percent == pytest.approx(20.0)
        assert stats.current_daily_pace == pytest.approx(24.5)
        assert stats.status == Status.WARNING

    def test_benchmark_saturates_after_reset_passed(self, now, state):
        # Reset three days ago: ten days have elapsed since the window start.
        s = replace(state, weekly_reset_date=(now - timedelta(days=3)).isoformat())
        stats = calculate_weekly_stats(now, s)
        assert stats.benchmark_percent == 100
        assert stats.time_progress_percent == 100
        assert stats.days_remaining == 0
        assert stats.hours_remaining == 0

    def test_benchmark_saturates_at_work_days(self, now, state):
        s = replace(state, weekly_work_days=2, weekly_reset_date="2026-10-20T12:00")
        assert calculate_weekly_stats(now, s).benchmark_percent == 100

    def test_window_just_started_has_no_pace(self, now, state):
        s = replace(state, weekly_reset_date=(now + timedelta(days=7)).isoformat())
        stats = calculate_weekly_stats(now, s)
        assert stats.current_daily_pace == 0
        assert stats.benchmark_percent == 0
        assert stats.time_progress_percent == 0
        assert stats.days_remaining == 7

    def test_window_not_started_yet(self, now, state):
        s = replace(state, weekly_reset_date=(now + timedelta(days=9)).isoformat())
        stats = calculate_weekly_stats(now, s)
        assert stats.current_daily_pace == 0
        assert stats.benchmark_percent == 0
        assert stats.time_progress_percent == 0

    @pytest.mark.parametrize("value", ["", "not a date", None, "2026-13-01T00:00"])
    def test_invalid_reset_defaults_to_a_week_from_now(self, now, state, value):
        stats = calculate_weekly_stats(now, replace(state, weekly_reset_date=value))
        assert stats.reset_date == now + timedelta(days=7)
        assert stats.start_date == now

    def test_reset_as_datetime(self, now, state):
        reset = datetime(2026, 10, 20, 12, 0)
        assert calculate_weekly_stats(now, replace(state, weekly_reset_date=reset)).reset_date == reset

    def test_aware_reset_with_aware_now(self, state):
        now = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)
        s = replace(state, weekly_reset_date="2026-10-20T14:00+02:00")
        stats = calculate_weekly_stats(now, s)
        assert stats.days_remaining == 4
        assert stats.hours_remaining == 0

    def test_days_and_hours_remaining(self, now, state):
        reset = now + timedelta(days=2, hours=5, minutes=30)
        stats = calculate_weekly_stats(now, replace(state, weekly_reset_date=reset))
        assert stats.days_remaining == 2
        assert stats.hours_remaining == 5

    def test_non_numeric_percent_is_zero(self, now, state):
        stats = calculate_weekly_stats(now, replace(state, weekly_percent_used="?"))
        assert stats.percent_used == 0
        assert stats.current_daily_pace == 0

    def test_invalid_work_days_default_to_five(self, now, state):
        stats = calculate_weekly_stats(now, replace(state, weekly_work_days=""))
        assert stats.work_days == 5
        assert stats.max_safe_daily_pace == pytest.approx(20.0)

    def test_idempotent(self, now, state):
        assert calculate_weekly_stats(now, state) == calculate_weekly_stats(now, state)


class TestCalculateSonnetStats:
    def test_uses_sonnet_percent_and_shared_reset(self, now, state):
        stats = calculate_sonnet_stats(now, state)
        assert stats.percent_used == 10
        assert stats.reset_date == datetime(2026, 10, 20, 12, 0)
        assert stats.status == Status.OK

    def test_missing_sonnet_percent_is_zero(self, now, state):
        stats = calculate_sonnet_stats(now, replace(state, weekly_sonnet_percent_used=None))
        assert stats.percent_used == 0

    def test_distinct_sonnet_reset(self, now, state):
        s = replace(state, weekly_sonnet_reset_date="2026-10-18T09:00")
        stats = calculate_sonnet_stats(now, s)
        assert stats.reset_date == datetime(2026, 10, 18, 9, 0)
        assert stats.start_date == datetime(2026, 10, 11, 9, 0)

    def test_does_not_touch_all_models_stats(self, now, state):
        calculate_sonnet_stats(now, state)
        assert calculate_weekly_stats(now, state).percent_used == 60

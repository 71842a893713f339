"""Tests for quota/monthly.py (billing cycle)."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from quota_pace.quota.monthly import add_months, calculate_monthly_progress


class TestAddMonths:
    @pytest.mark.parametrize("start, expected", [
        (datetime(2026, 10, 1), datetime(2026, 11, 1)),
        (datetime(2024, 1, 31), datetime(2024, 2, 29)),
        (datetime(2025, 1, 31), datetime(2025, 2, 28)),
        (datetime(2026, 3, 31), datetime(2026, 4, 30)),
        (datetime(2025, 12, 15, 8, 30), datetime(2026, 1, 15, 8, 30)),
    ])
    def test_one_month(self, start, expected):
        assert add_months(start, 1) == expected

    def test_several_months(self):
        assert add_months(datetime(2026, 11, 30), 3) == datetime(2027, 2, 28)


class TestCalculateMonthlyProgress:
    def test_mid_cycle(self, now):
        result = calculate_monthly_progress(now, "2026-10-01")
        assert result.next_billing_date == datetime(2026, 11, 1)
        assert result.total_days_in_cycle == 31
        assert result.progress_percent == pytest.approx(15.5 / 31 * 100)
        assert result.days_remaining == 15

    def test_end_of_january_lands_on_end_of_february(self):
        result = calculate_monthly_progress(datetime(2024, 2, 10), "2024-01-31")
        assert result.next_billing_date == datetime(2024, 2, 29)
        assert result.total_days_in_cycle == 29

    def test_date_object(self, now):
        result = calculate_monthly_progress(now, date(2026, 10, 1))
        assert result.next_billing_date == datetime(2026, 11, 1)

    @pytest.mark.parametrize("value", ["", "yesterday", None, "2026-02-30"])
    def test_invalid_date_uses_start_of_month(self, now, value):
        result = calculate_monthly_progress(now, value)
        assert result.next_billing_date == datetime(2026, 11, 1)

    def test_missed_payment_does_not_roll_forward(self, now):
        result = calculate_monthly_progress(now, "2026-08-01")
        assert result.next_billing_date == datetime(2026, 9, 1)
        assert result.progress_percent == 100
        assert result.days_remaining == -45

    def test_payment_in_future(self, now):
        result = calculate_monthly_progress(now, "2026-10-20")
        assert result.progress_percent == 0
        assert result.days_remaining == 34

    def test_idempotent(self, now):
        assert calculate_monthly_progress(now, "2026-10-01") == calculate_monthly_progress(now, "2026-10-01")

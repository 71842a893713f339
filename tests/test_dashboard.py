"""Tests for dashboard rendering."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from quota_pace.dashboard import render_dashboard, render_monthly, render_session, render_weekly
from quota_pace.quota.monthly import calculate_monthly_progress
from quota_pace.quota.session import calculate_quota_stats
from quota_pace.quota.weekly import calculate_weekly_stats


def test_render_dashboard_sections(now, state):
    out = render_dashboard(now, state)
    assert "Usage Tracker  12:00:00  (LOCAL time)" in out
    assert "Current Session" in out
    assert "Current Week (All)" in out
    assert "Current Week (Sonnet)" in out
    assert "Billing Cycle" in out


def test_render_dashboard_clock_label(now, state):
    out = render_dashboard(now, state, time_mode="utc", hour_offset=-2)
    assert "(UTC -2h time)" in out


def test_render_dashboard_fractional_offset(now, state):
    out = render_dashboard(now, state, hour_offset=5.5)
    assert "(LOCAL +5.5h time)" in out


def test_billing_card_hidden_without_payment_date(now, state):
    out = render_dashboard(now, replace(state, last_payment_date=""))
    assert "Billing Cycle" not in out


class TestRenderSession:
    def test_active_window(self, now, state):
        lines = render_session(now, calculate_quota_stats(now, state))
        text = "\n".join(lines)
        assert "Window:      10:00 - 15:00" in text
        assert "Window inactive" not in text
        assert "WARNING" in text
        assert "+10.0% over budget" in text
        assert "Rate:        25.0% / h (max safe 20.0% / h)" in text
        assert "Hits 100%:   14:00" in text
        assert "Resets in:   3h 0m" in text

    def test_inactive_window(self, state):
        now = datetime(2026, 10, 16, 16, 0)
        text = "\n".join(render_session(now, calculate_quota_stats(now, replace(state, percent_used=0))))
        assert "Window inactive: next window starts Tomorrow 10:00." in text
        assert "Hits 100%:   --:--" in text
        assert "0.0% under budget" in text

    def test_critical_status(self, state):
        now = datetime(2026, 10, 16, 10, 0)
        text = "\n".join(render_session(now, calculate_quota_stats(now, replace(state, percent_used=40))))
        assert "CRITICAL" in text

    def test_bar_width(self, now, state):
        lines = render_session(now, calculate_quota_stats(now, state), width=10)
        used = next(line for line in lines if line.startswith("Used:"))
        assert "[#####-----]" in used


class TestRenderWeekly:
    def test_contents(self, now, state):
        text = "\n".join(render_weekly("Week", calculate_weekly_stats(now, state)))
        assert text.startswith("Week\n")
        assert "Window:      Oct 13 12:00 - Oct 20 12:00" in text
        assert "0.0% safe buffer" in text
        assert "Pace:        20.0% / day (max safe 20.0% / day over 5 work days)" in text
        assert "Resets in:   4d 0h" in text

    def test_ahead_of_schedule(self, now, state):
        stats = calculate_weekly_stats(now, replace(state, weekly_percent_used=70))
        text = "\n".join(render_weekly("Week", stats))
        assert "+10.0% ahead of schedule" in text
        assert "WARNING" in text


def test_render_monthly(now):
    text = "\n".join(render_monthly(calculate_monthly_progress(now, "2026-10-01")))
    assert "Next bill:   Nov 1, 2026" in text
    assert "Days left:   15 of 31" in text

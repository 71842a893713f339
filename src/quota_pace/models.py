"""Data models for quota-pace."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from typing import Any


class Status(enum.Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class QuotaState:
    """Snapshot of the user's inputs.

    Numeric fields may hold raw strings exactly as typed; the calculators
    coerce them defensively.
    """

    # Short window
    reset_time: str = ""
    percent_used: float | str = 0
    window_length_hours: float | str = 5

    # Weekly
    weekly_percent_used: float | str = 0
    weekly_reset_date: str | datetime = ""
    weekly_work_days: int | str = 7

    # Sonnet-only weekly sub-quota
    weekly_sonnet_percent_used: float | str | None = 0
    weekly_sonnet_reset_date: str | datetime | None = None

    # Billing
    last_payment_date: str | date = ""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable mapping of the state."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, (date, datetime)):
                data[key] = value.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuotaState:
        """Build a state from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class CalculationResult:
    window_start: datetime
    window_end: datetime
    elapsed_ms: float
    rate_per_hour: float
    safe_rate_per_hour: float
    forecast_percent: float
    remaining_percent: float
    estimated_finish_date: datetime | None
    time_progress_percent: float
    status: Status
    is_window_active: bool
    percent_used: float = 0.0


@dataclass(frozen=True)
class WeeklyCalculationResult:
    start_date: datetime
    reset_date: datetime
    percent_used: float
    time_progress_percent: float
    benchmark_percent: float
    status: Status
    days_remaining: int
    hours_remaining: int
    current_daily_pace: float
    max_safe_daily_pace: float
    work_days: int


@dataclass(frozen=True)
class MonthlyCalculationResult:
    progress_percent: float
    next_billing_date: datetime
    days_remaining: int
    total_days_in_cycle: int

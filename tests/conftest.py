"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from quota_pace import config, db
from quota_pace.models import QuotaState


@pytest.fixture(autouse=True)
def tmp_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect config/data directory to a temp dir for every test."""
    cfg_dir = tmp_path / "quota-pace-test"
    cfg_dir.mkdir()
    monkeypatch.setattr(config, "CONFIG_DIR", cfg_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", cfg_dir / "config.toml")
    db.init_db()
    return cfg_dir


@pytest.fixture
def now() -> datetime:
    """Friday 2026-10-16 12:00 local wall-clock time."""
    return datetime(2026, 10, 16, 12, 0)


@pytest.fixture
def state() -> QuotaState:
    """Session resets at 15:00 (5h window), weekly resets Tuesday 12:00."""
    return QuotaState(
        reset_time="15:00",
        percent_used=50,
        window_length_hours=5,
        weekly_percent_used=60,
        weekly_reset_date="2026-10-20T12:00",
        weekly_work_days=5,
        weekly_sonnet_percent_used=10,
        last_payment_date="2026-10-01",
    )

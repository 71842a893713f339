"""User input state: bounds checking, defaults, persistence and invalidation.

Inputs arrive as raw strings from the CLI. Values are bounded in two
passes, mirroring how a form validates while typing and again when a field
is committed:

- ``clamp_on_input`` only enforces upper bounds (percent ≤ 100,
  work days ≤ 7, window ≤ 24h) and leaves everything else as typed.
- ``finalize_input`` applies lower bounds and replaces unusable values
  with defaults.

On load, stored values that can no longer be true are invalidated before
any calculator sees them: an expired weekly reset clears the weekly
percentages, and session usage saved more than ``stale_after_hours`` ago
is reset to 0%.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timedelta
from typing import Any

from quota_pace import config, constants, db
from quota_pace.models import QuotaState
from quota_pace.quota.inputs import parse_datetime

logger = logging.getLogger("quota-pace")

PERCENT_KEYS = ("percent_used", "weekly_percent_used", "weekly_sonnet_percent_used")
WORK_DAYS_KEY = "weekly_work_days"
WINDOW_KEY = "window_length_hours"

_WEEKLY_RESET_FORMAT = "%Y-%m-%dT%H:%M"


def _parse_float(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def default_weekly_reset(now: datetime) -> str:
    """One week from *now* at the configured reset hour."""
    hour = _parse_float(config.get("weekly", "default_reset_hour", constants.DEFAULT_WEEKLY_RESET_HOUR))
    if hour is None or not 0 <= hour <= 23:
        logger.warning(
            "Ignoring [weekly] default_reset_hour outside 0-23, using %d:00",
            constants.DEFAULT_WEEKLY_RESET_HOUR,
        )
        hour = constants.DEFAULT_WEEKLY_RESET_HOUR
    reset = (now + timedelta(days=constants.WEEK_DAYS)).replace(
        hour=int(hour), minute=0, second=0, microsecond=0
    )
    return reset.strftime(_WEEKLY_RESET_FORMAT)


def default_state(now: datetime) -> QuotaState:
    """Fresh inputs: reset at the next whole hour, nothing used yet."""
    next_hour = now + timedelta(hours=1)
    return QuotaState(
        reset_time=next_hour.strftime("%H:00"),
        percent_used=0,
        window_length_hours=config.get("session", "window_hours", constants.DEFAULT_WINDOW_HOURS),
        weekly_percent_used=0,
        weekly_reset_date=default_weekly_reset(now),
        weekly_work_days=config.get("weekly", "work_days", constants.DEFAULT_STATE_WORK_DAYS),
        weekly_sonnet_percent_used=0,
        weekly_sonnet_reset_date=None,
        last_payment_date="",
    )


def clamp_on_input(key: str, value: Any) -> Any:
    """Apply upper bounds to a freshly typed value."""
    number = _parse_float(value)
    if number is None:
        return value
    if key in PERCENT_KEYS and number > 100:
        return 100.0
    if key == WORK_DAYS_KEY and number > constants.MAX_WORK_DAYS:
        return constants.MAX_WORK_DAYS
    if key == WINDOW_KEY and number > constants.MAX_WINDOW_HOURS:
        return float(constants.MAX_WINDOW_HOURS)
    return value


def finalize_input(key: str, value: Any) -> Any:
    """Apply lower bounds and defaults to a committed value."""
    if isinstance(value, str) and key not in PERCENT_KEYS + (WORK_DAYS_KEY, WINDOW_KEY):
        return value.strip()

    number = _parse_float(value)

    if key == WORK_DAYS_KEY:
        if number is None or number < constants.MIN_WORK_DAYS:
            return constants.MIN_WORK_DAYS
        return int(min(number, constants.MAX_WORK_DAYS))

    if key == WINDOW_KEY:
        if number is None or number <= 0:
            return float(config.get("session", "window_hours", constants.DEFAULT_WINDOW_HOURS))
        return min(number, float(constants.MAX_WINDOW_HOURS))

    if key in PERCENT_KEYS:
        if number is None or number < 0:
            return 0.0
        return min(number, 100.0)

    return value


def invalidate(saved: dict[str, Any], updated_at: datetime | None, now: datetime) -> dict[str, Any]:
    """Drop stored values that expired while the dashboard was closed."""
    result = dict(saved)

    weekly_reset = parse_datetime(result.get("weekly_reset_date"), now)
    if weekly_reset is None or weekly_reset < now:
        logger.info("Weekly quota expired, resetting weekly stats.")
        result["weekly_reset_date"] = default_weekly_reset(now)
        result["weekly_percent_used"] = 0
        result["weekly_sonnet_percent_used"] = 0
        result["weekly_sonnet_reset_date"] = None
    elif result.get("weekly_sonnet_reset_date"):
        sonnet_reset = parse_datetime(result["weekly_sonnet_reset_date"], now)
        if sonnet_reset is None or sonnet_reset < now:
            logger.info("Sonnet weekly quota expired, resetting sonnet stats.")
            result["weekly_sonnet_percent_used"] = 0
            result["weekly_sonnet_reset_date"] = None

    if updated_at is not None:
        stale_hours = config.get("session", "stale_after_hours", constants.STALE_SESSION_HOURS)
        updated_at = parse_datetime(updated_at, now)
        if updated_at is not None and now - updated_at > timedelta(hours=stale_hours):
            logger.info("Session stale (>%sh), resetting session percent.", stale_hours)
            result["percent_used"] = 0

    return result


def load_state(now: datetime) -> QuotaState:
    """Load the stored inputs, applying invalidation on top of defaults."""
    db.init_db()
    defaults = default_state(now)

    row = db.get_value(constants.STATE_KEY)
    if row is None:
        return defaults
    raw, updated_at = row

    try:
        saved = json.loads(raw)
    except json.JSONDecodeError:
        logger.error("Failed to parse saved inputs", exc_info=True)
        return defaults
    if not isinstance(saved, dict):
        logger.error("Saved inputs are not a mapping, ignoring them")
        return defaults

    saved = invalidate(saved, updated_at, now)
    return QuotaState.from_dict({**defaults.to_dict(), **saved})


def save_state(state: QuotaState, now: datetime) -> None:
    db.init_db()
    db.set_value(constants.STATE_KEY, json.dumps(state.to_dict()), now)


def update_state(changes: dict[str, Any], now: datetime) -> QuotaState:
    """Apply *changes* to the stored inputs and persist the result.

    Raises KeyError for a key that is not a QuotaState field.
    """
    data = load_state(now).to_dict()
    for key, value in changes.items():
        if key not in data:
            raise KeyError(key)
        data[key] = finalize_input(key, clamp_on_input(key, value))

    state = QuotaState.from_dict(data)
    save_state(state, now)
    logger.info("Updated inputs: %s", ", ".join(sorted(changes)))
    return state


def reset_state() -> bool:
    """Forget the stored inputs. Returns True if anything was stored."""
    db.init_db()
    return db.delete_value(constants.STATE_KEY)

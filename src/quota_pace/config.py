"""TOML configuration management."""

from __future__ import annotations

import json
import os
import re
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from quota_pace import constants

CONFIG_DIR = Path(os.environ.get("QUOTA_PACE_CONFIG_DIR", "~/.config/quota-pace")).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# quota-pace configuration

[session]
# Length of the rolling usage window in hours (max {max_window_hours})
window_hours = {window_hours}
# Stored session usage older than this many hours is reset to 0% on load
stale_after_hours = {stale_after_hours}

[weekly]
# Days per week you plan to spend the weekly quota on (1-7)
work_days = {work_days}
# Hour of day used when the weekly reset date has to be re-derived
default_reset_hour = {default_reset_hour}

[clock]
# "local" or "utc": which wall clock the reset times refer to
time_mode = "{time_mode}"
# Manual correction in hours added to the clock (-24 to 24)
hour_offset = 0

[display]
# Seconds between redraws in `quota-pace show --watch`
refresh_seconds = {refresh_seconds}
# Width of the text progress bars
bar_width = {bar_width}
""".format(
    max_window_hours=constants.MAX_WINDOW_HOURS,
    window_hours=constants.DEFAULT_WINDOW_HOURS,
    stale_after_hours=constants.STALE_SESSION_HOURS,
    work_days=constants.DEFAULT_STATE_WORK_DAYS,
    default_reset_hour=constants.DEFAULT_WEEKLY_RESET_HOUR,
    time_mode=constants.DEFAULT_TIME_MODE,
    refresh_seconds=constants.REFRESH_SECONDS,
    bar_width=constants.BAR_WIDTH,
)


def init_config(force: bool = False) -> Path:
    """Create default config file. Returns path to config file."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    if CONFIG_FILE.exists() and not force:
        raise FileExistsError(f"Config already exists: {CONFIG_FILE}")
    CONFIG_FILE.write_text(DEFAULT_CONFIG)
    return CONFIG_FILE


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base*, returning a new dict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict[str, Any]:
    """Load config from TOML file, merged on top of built-in defaults.

    Keys present in the default config but absent from the on-disk file
    are filled in automatically.
    """
    defaults = tomllib.loads(DEFAULT_CONFIG)
    if CONFIG_FILE.exists():
        on_disk = tomllib.loads(CONFIG_FILE.read_text())
        return _deep_merge(defaults, on_disk)
    return defaults


def get(section: str, key: str, default: Any = None) -> Any:
    """Get a config value by section and key."""
    cfg = load_config()
    return cfg.get(section, {}).get(key, default)


def data_dir() -> Path:
    """Return the data directory (same as config dir)."""
    d = CONFIG_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


def _toml_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(str(value))


def _section_bounds(lines: list[str], section: str) -> tuple[int, int] | None:
    """Return ``(header_index, end_index)`` of *section*, or None if absent."""
    start = None
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped.startswith("["):
            continue
        if start is not None:
            return start, i
        if stripped == f"[{section}]":
            start = i
    return None if start is None else (start, len(lines))


def set_value(section: str, key: str, value: Any) -> None:
    """Persist a single ``key = value`` inside *section* of the config file.

    Comments and unrelated keys are left untouched.
    """
    if not CONFIG_FILE.exists():
        init_config()

    lines = CONFIG_FILE.read_text().splitlines()
    entry = f"{key} = {_toml_literal(value)}"
    key_re = re.compile(rf"^{re.escape(key)}\s*=")

    bounds = _section_bounds(lines, section)
    if bounds is None:
        if lines and lines[-1].strip():
            lines.append("")
        lines.extend([f"[{section}]", entry])
    else:
        start, end = bounds
        existing = next(
            (i for i in range(start + 1, end) if key_re.match(lines[i].strip())), None
        )
        if existing is not None:
            lines[existing] = entry
        else:
            # keep the blank separator before the next header
            insert_at = end
            while insert_at > start + 1 and not lines[insert_at - 1].strip():
                insert_at -= 1
            lines.insert(insert_at, entry)

    CONFIG_FILE.write_text("\n".join(lines) + "\n")

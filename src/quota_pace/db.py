"""SQLite persistence layer: a small key-value store."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator

from quota_pace import config, constants

SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _db_path() -> Path:
    return config.data_dir() / constants.DB_FILE_NAME


def _parse_dt(s: str | None) -> datetime | None:
    if s is None:
        return None
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _fmt_dt(dt: datetime) -> str:
    return dt.isoformat()


@contextmanager
def connect() -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    conn = sqlite3.connect(str(_db_path()))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialize the database schema."""
    with connect() as conn:
        conn.executescript(SCHEMA)


def get_value(key: str) -> tuple[str, datetime | None] | None:
    """Return ``(value, updated_at)`` for *key*, or None if unset."""
    with connect() as conn:
        row = conn.execute(
            "SELECT value, updated_at FROM kv WHERE key = ?", (key,)
        ).fetchone()
    if row is None:
        return None
    return row["value"], _parse_dt(row["updated_at"])


def set_value(key: str, value: str, updated_at: datetime) -> None:
    with connect() as conn:
        conn.execute(
            "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
            "updated_at = excluded.updated_at",
            (key, value, _fmt_dt(updated_at)),
        )


def delete_value(key: str) -> bool:
    """Delete *key*. Returns True if a row was removed."""
    with connect() as conn:
        cur = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        return cur.rowcount > 0

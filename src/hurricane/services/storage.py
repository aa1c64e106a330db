from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

from hurricane.config.settings import settings

logger = logging.getLogger(__name__)

USER_KEY = "study_user"
SUBJECTS_KEY = "study_subjects"
SCHEDULE_KEY = "study_schedule"
REDEEMED_KEY = "redeemed_cycles"
STRONG_SUBJECTS_KEY = "strong_subjects"
TARGET_GOAL_KEY = "target_goal"
THEME_KEY = "app_theme"

ALL_KEYS = (
    USER_KEY,
    SUBJECTS_KEY,
    SCHEDULE_KEY,
    REDEEMED_KEY,
    STRONG_SUBJECTS_KEY,
    TARGET_GOAL_KEY,
    THEME_KEY,
)


class StorageError(Exception):
    pass


class Storage:
    """Last-write-wins key-value store holding JSON documents in sqlite."""

    def __init__(self, db_path: str = "hurricane.db") -> None:
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open storage at {db_path}") from exc
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    @classmethod
    def from_settings(cls) -> "Storage":
        return cls(settings.db_path)

    def _init_schema(self) -> None:
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL,
              updated_at TEXT NOT NULL
            );
            """
        )
        self.conn.commit()

    def load(self, key: str, default: Any = None) -> Any:
        return self._read(key, default)

    def save(self, key: str, value: Any) -> None:
        self._write(key, value)
        self.conn.commit()

    def update(self, key: str, apply: Callable[[Any], Any], default: Any = None) -> Any:
        """Read, transform and write back one key while holding the database write lock.

        Concurrent writers on other connections wait instead of overwriting each other.
        """
        self.conn.execute("BEGIN IMMEDIATE")
        try:
            value = apply(self._read(key, default))
            self._write(key, value)
        except BaseException:
            self.conn.rollback()
            raise
        self.conn.commit()
        return value

    def _read(self, key: str, default: Any) -> Any:
        cur = self.conn.cursor()
        cur.execute("SELECT value FROM kv WHERE key=?", (key,))
        row = cur.fetchone()
        if not row:
            return default
        try:
            return json.loads(row["value"])
        except ValueError:
            logger.warning("Discarding unreadable value stored under %r", key)
            return default

    def _write(self, key: str, value: Any) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value for {key!r} is not serializable") from exc
        self.conn.execute(
            """INSERT INTO kv(key, value, updated_at) VALUES(?,?,?)
               ON CONFLICT(key) DO UPDATE SET
                   value=excluded.value,
                   updated_at=excluded.updated_at""",
            (key, payload, now),
        )

    def remove(self, keys: Iterable[str]) -> None:
        self.conn.executemany("DELETE FROM kv WHERE key=?", [(k,) for k in keys])
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

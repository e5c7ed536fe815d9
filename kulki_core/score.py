from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Dict, Protocol

logger = logging.getLogger(__name__)


class ScoreKeeper:
    """Session score: one point per removed marble, never decreasing."""

    def __init__(self) -> None:
        self._score = 0

    @property
    def score(self) -> int:
        return self._score

    def reset(self, score: int = 0) -> None:
        if score < 0:
            raise ValueError(f"score cannot be negative: {score}")
        self._score = score

    def add_removed(self, count: int) -> int:
        if count < 0:
            raise ValueError(f"removed count cannot be negative: {count}")
        self._score += count
        return self._score


class HighScoreStore(Protocol):
    def load(self, key: str) -> int: ...

    def save(self, key: str, score: int) -> None: ...


class MemoryHighScoreStore:
    def __init__(self) -> None:
        self._scores: Dict[str, int] = {}

    def load(self, key: str) -> int:
        return self._scores.get(key, 0)

    def save(self, key: str, score: int) -> None:
        self._scores[key] = score


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Falls back to KULKI_DB_DIR, then /tmp, when the directory of db_path cannot be created."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        logger.warning("cannot create directory for %s, using a fallback", db_path)
    fallback = os.getenv('KULKI_DB_DIR') or '/tmp'
    os.makedirs(fallback, exist_ok=True)
    return os.path.join(fallback, os.path.basename(db_path) or 'kulki.db')


def _ensure_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS high_scores (
            key TEXT PRIMARY KEY,
            score INTEGER NOT NULL,
            achieved_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


class SqliteHighScoreStore:
    """High scores kept in a small SQLite table, one row per configuration key."""

    def __init__(self, db_path: str = 'data/kulki.db') -> None:
        self.db_path = _resolve_db_path(db_path)

    def _connect(self) -> sqlite3.Connection:
        _ensure_db_dir(self.db_path)
        conn = sqlite3.connect(self.db_path)
        _ensure_db(conn)
        return conn

    def load(self, key: str) -> int:
        conn = self._connect()
        try:
            row = conn.execute("SELECT score FROM high_scores WHERE key = ?", (key,)).fetchone()
            return int(row[0]) if row else 0
        finally:
            conn.close()

    def save(self, key: str, score: int) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO high_scores (key, score, achieved_at) VALUES (?, ?, ?)",
                (key, int(score), datetime.now(timezone.utc).isoformat(timespec='seconds')),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("stored high score %d for %s", score, key)

"""SQLite + FTS5 note store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

LOGGER = logging.getLogger(__name__)

# Fixed width, so comparing the text columns compares instants.
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as UTC text. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.strptime(value, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class SQLiteNoteStore:
    """Persistence layer for note metadata and its full-text index."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        LOGGER.debug("Ensuring note index schema in %s", self.db_path)
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    path TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL DEFAULT '',
                    body TEXT NOT NULL DEFAULT '',
                    word_count INTEGER NOT NULL DEFAULT 0,
                    checksum TEXT NOT NULL DEFAULT '',
                    created TEXT,
                    modified TEXT
                )
                """
            )
            conn.execute(
                """CREATE INDEX IF NOT EXISTS idx_notes_checksum
                    ON notes(checksum)
                """
            )
            conn.execute(
                """
                CREATE VIRTUAL TABLE IF NOT EXISTS notes_fts USING fts5(
                    path, title, body,
                    content = 'notes',
                    content_rowid = 'id',
                    tokenize = 'porter unicode61 remove_diacritics 1'
                )
                """
            )
            conn.execute(
                """
                CREATE TRIGGER IF NOT EXISTS notes_ai AFTER INSERT ON notes BEGIN
                    INSERT INTO notes_fts(rowid, path, title, body)
                    VALUES (new.id, new.path, new.title, new.body);
                END;
                """
            )
            conn.execute(
                """
                CREATE TRIGGER IF NOT EXISTS notes_ad AFTER DELETE ON notes BEGIN
                    INSERT INTO notes_fts(notes_fts, rowid, path, title, body)
                    VALUES ('delete', old.id, old.path, old.title, old.body);
                END;
                """
            )
            conn.execute(
                """
                CREATE TRIGGER IF NOT EXISTS notes_au AFTER UPDATE ON notes BEGIN
                    INSERT INTO notes_fts(notes_fts, rowid, path, title, body)
                    VALUES ('delete', old.id, old.path, old.title, old.body);
                    INSERT INTO notes_fts(rowid, path, title, body)
                    VALUES (new.id, new.path, new.title, new.body);
                END;
                """
            )

"""Add, update and remove notes in the index."""

from __future__ import annotations

import sqlite3
from typing import Iterator, Optional

from notefinder.errors import DuplicatePathError, NotIndexedError, StorageFault
from notefinder.index.storage import from_db_timestamp, to_db_timestamp
from notefinder.models import IndexedMetadata, NoteMetadata


def row_to_note(row: sqlite3.Row) -> NoteMetadata:
    return NoteMetadata(
        path=row["path"],
        title=row["title"],
        body=row["body"],
        word_count=row["word_count"],
        checksum=row["checksum"],
        created=from_db_timestamp(row["created"]),
        modified=from_db_timestamp(row["modified"]),
    )


class NoteDAO:
    """Note rows accessed through a connection owned by the caller.

    The DAO never commits: wrap related calls in
    ``SQLiteNoteStore.transaction()`` and hand the yielded connection here.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def indexed(self) -> Iterator[IndexedMetadata]:
        """Yield the path and modification time of every note, by path."""
        cursor = self.conn.execute("SELECT path, modified FROM notes ORDER BY path ASC")
        for row in cursor:
            yield IndexedMetadata(path=row[0], modified=from_db_timestamp(row[1]))

    def find_by_path(self, path: str) -> Optional[NoteMetadata]:
        row = self.conn.execute(
            """
            SELECT path, title, body, word_count, checksum, created, modified
              FROM notes
             WHERE path = ?
            """,
            (path,),
        ).fetchone()
        return row_to_note(row) if row is not None else None

    def add(self, note: NoteMetadata) -> None:
        try:
            self.conn.execute(
                """
                INSERT INTO notes(path, title, body, word_count, checksum, created, modified)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    note.path,
                    note.title,
                    note.body,
                    note.word_count,
                    note.checksum,
                    to_db_timestamp(note.created),
                    to_db_timestamp(note.modified),
                ),
            )
        except sqlite3.IntegrityError as exc:
            if exc.sqlite_errorname == "SQLITE_CONSTRAINT_UNIQUE":
                raise DuplicatePathError(note.path) from exc
            raise StorageFault(note.path, "add") from exc
        except sqlite3.Error as exc:
            raise StorageFault(note.path, "add") from exc

    def update(self, note: NoteMetadata) -> None:
        try:
            cursor = self.conn.execute(
                """
                UPDATE notes
                   SET title = ?, body = ?, word_count = ?, checksum = ?,
                       created = ?, modified = ?
                 WHERE path = ?
                """,
                (
                    note.title,
                    note.body,
                    note.word_count,
                    note.checksum,
                    to_db_timestamp(note.created),
                    to_db_timestamp(note.modified),
                    note.path,
                ),
            )
        except sqlite3.Error as exc:
            raise StorageFault(note.path, "update") from exc
        # SQLite does not report a missing row as an error.
        if cursor.rowcount == 0:
            raise NotIndexedError(note.path, "update")

    def remove(self, path: str) -> None:
        try:
            cursor = self.conn.execute("DELETE FROM notes WHERE path = ?", (path,))
        except sqlite3.Error as exc:
            raise StorageFault(path, "remove") from exc
        if cursor.rowcount == 0:
            raise NotIndexedError(path, "remove")

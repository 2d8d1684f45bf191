"""Shared fixtures: a small notebook index."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from notefinder.index.storage import SQLiteNoteStore, to_db_timestamp
from notefinder.models import NoteMetadata


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# Rows are inserted in this order, which is also the default result order.
CORPUS = [
    NoteMetadata(
        path="ref/test/b.md",
        title="A nested note",
        body="This one is in a sub sub directory",
        word_count=8,
        checksum="yvwbae",
        created=utc(2019, 11, 20, 20, 32, 56),
        modified=utc(2019, 11, 20, 20, 34, 6),
    ),
    NoteMetadata(
        path="f39c8.md",
        title="An interesting note",
        body="Its content will surprise you",
        word_count=5,
        checksum="irkwyc",
        created=utc(2020, 1, 19, 10, 58, 41),
        modified=utc(2020, 1, 20, 8, 52, 42),
    ),
    NoteMetadata(
        path="ref/test/a.md",
        title="Another nested note",
        body="It shall appear before b.md",
        word_count=5,
        checksum="iecywst",
        created=utc(2019, 11, 20, 20, 32, 56),
        modified=utc(2019, 11, 20, 20, 34, 6),
    ),
    NoteMetadata(
        path="log/2021-02-04.md",
        title="February 4, 2021",
        body="A third daily note here",
        word_count=5,
        checksum="earkte",
        created=utc(2020, 11, 29, 8, 20, 18),
        modified=utc(2020, 11, 10, 8, 20, 18),
    ),
    NoteMetadata(
        path="index.md",
        title="Index",
        body="Index of the Zettelkasten",
        word_count=4,
        checksum="iaefhv",
        created=utc(2019, 12, 4, 11, 59, 11),
        modified=utc(2019, 12, 4, 12, 17, 21),
    ),
    NoteMetadata(
        path="log/2021-01-03.md",
        title="January 3, 2021",
        body="A daily note",
        word_count=3,
        checksum="qwfpgj",
        created=utc(2020, 11, 22, 16, 27, 45),
        modified=utc(2020, 11, 22, 16, 27, 45),
    ),
    NoteMetadata(
        path="log/2021-01-04.md",
        title="January 4, 2021",
        body="A second daily note",
        word_count=4,
        checksum="arstde",
        created=utc(2020, 11, 29, 8, 20, 18),
        modified=utc(2020, 11, 29, 8, 20, 18),
    ),
]

CORPUS_BY_PATH = {note.path: note for note in CORPUS}


@pytest.fixture
def store(tmp_path):
    """Empty note store in a temporary database."""
    store = SQLiteNoteStore(tmp_path / "notes.db")
    yield store
    store.close()


@pytest.fixture
def populated_store(store):
    """Store holding the CORPUS notes, inserted with plain SQL."""
    with store.transaction() as conn:
        for note in CORPUS:
            conn.execute(
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
    return store

"""Errors raised by the note index.

Messages name the note path (or the query) and the failed operation. The
underlying SQLite error is chained as ``__cause__`` instead of being copied
into the message.
"""

from __future__ import annotations


class NoteIndexError(Exception):
    """Base exception for note index errors."""

    def __init__(self, context: str, message: str) -> None:
        self.context = context
        self.message = message
        super().__init__(f"{context}: {message}")

    @property
    def path(self) -> str:
        return self.context


class DuplicatePathError(NoteIndexError):
    """Raised when adding a note whose path is already indexed."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "can't add note to the index")


class NotIndexedError(NoteIndexError):
    """Raised when updating or removing a note that is not indexed."""

    def __init__(self, path: str, operation: str) -> None:
        self.operation = operation
        super().__init__(
            path, f"failed to {operation} note index: note not found in the index"
        )


class QueryError(NoteIndexError):
    """Raised when a compiled find query cannot be executed."""

    def __init__(self, query: str) -> None:
        super().__init__(query, "failed to search the note index")


class StorageFault(NoteIndexError):
    """Raised for storage failures unrelated to the note itself.

    The transaction should be rolled back before retrying.
    """

    def __init__(self, path: str, operation: str) -> None:
        self.operation = operation
        super().__init__(path, f"storage error while trying to {operation} the note")

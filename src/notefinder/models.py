"""Core notefinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from notefinder.index.filters import Filter


@dataclass(slots=True)
class NoteMetadata:
    """Everything the index stores about a single note."""

    path: str
    title: str = ""
    body: str = ""
    word_count: int = 0
    checksum: str = ""
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Note path must not be empty")
        if self.word_count < 0:
            raise ValueError(f"{self.path}: word count must not be negative")


@dataclass(slots=True)
class IndexedMetadata:
    """Path and modification time of an indexed note, used for diffing."""

    path: str
    modified: Optional[datetime]


@dataclass(slots=True)
class FileMetadata:
    """A note file found on disk, before its content is loaded."""

    path: str
    modified: datetime


@dataclass(slots=True)
class Match:
    """Note returned by a query, with a short excerpt of its body."""

    metadata: NoteMetadata
    snippet: str = ""

    @property
    def path(self) -> str:
        return self.metadata.path


@dataclass(slots=True)
class FinderOpts:
    filters: List["Filter"] = field(default_factory=list)
    limit: int = 0

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError("Limit must be zero (unbounded) or positive")

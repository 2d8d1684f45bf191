"""Note indexing pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from notefinder.index.dao import NoteDAO
from notefinder.index.storage import SQLiteNoteStore
from notefinder.ingestion.note_loader import load_note
from notefinder.models import FileMetadata, IndexedMetadata, NoteMetadata
from notefinder.utils.files import iter_note_files

LOGGER = logging.getLogger(__name__)

NoteLoader = Callable[[FileMetadata], NoteMetadata]


class ChangeKind(str, Enum):
    ADD = "added"
    UPDATE = "modified"
    UNCHANGED = "unchanged"
    REMOVE = "removed"


@dataclass(slots=True)
class Change:
    kind: ChangeKind
    path: str
    source: Optional[FileMetadata] = None


@dataclass(slots=True)
class IndexStats:
    added: int = 0
    modified: int = 0
    unchanged: int = 0
    removed: int = 0
    failed: int = 0
    processed_paths: List[str] = field(default_factory=list)
    errors: Dict[str, Exception] = field(default_factory=dict)

    def increment(self, kind: ChangeKind, path: str) -> None:
        if kind is ChangeKind.ADD:
            self.added += 1
        elif kind is ChangeKind.UPDATE:
            self.modified += 1
        elif kind is ChangeKind.UNCHANGED:
            self.unchanged += 1
        else:
            self.removed += 1
        self.processed_paths.append(path)

    def record_failure(self, path: str, error: Exception) -> None:
        self.failed += 1
        self.errors[path] = error
        self.processed_paths.append(path)


class Reconciler:
    """Decide which notes need to be added, updated or removed."""

    def classify(
        self, indexed: Iterable[IndexedMetadata], sources: Iterable[FileMetadata]
    ) -> Iterator[Change]:
        """Compare files on disk with the indexed notes.

        ``sources`` may come in any order. Files whose modification time equals
        the indexed one are reported unchanged without being read. Removals
        come last, sorted by path.
        """
        remaining = {item.path: item.modified for item in indexed}

        for source in sources:
            if source.path not in remaining:
                yield Change(ChangeKind.ADD, source.path, source)
                continue
            indexed_modified = remaining.pop(source.path)
            if indexed_modified == source.modified:
                yield Change(ChangeKind.UNCHANGED, source.path, source)
            else:
                yield Change(ChangeKind.UPDATE, source.path, source)

        for path in sorted(remaining):
            yield Change(ChangeKind.REMOVE, path)


class Indexer:
    """Coordinates note loading and persistence."""

    def __init__(self, store: SQLiteNoteStore, *, reconciler: Optional[Reconciler] = None) -> None:
        self.store = store
        self.reconciler = reconciler or Reconciler()

    def index(
        self, dao: NoteDAO, sources: Iterable[FileMetadata], loader: NoteLoader
    ) -> IndexStats:
        """Bring the index in line with ``sources``.

        Runs inside the caller's transaction. A failing note is recorded in
        ``IndexStats.errors`` and does not stop the pass.
        """
        stats = IndexStats()

        for change in self.reconciler.classify(dao.indexed(), sources):
            if change.kind is ChangeKind.UNCHANGED:
                stats.increment(change.kind, change.path)
                continue
            try:
                LOGGER.debug("%s: %s", change.path, change.kind.value)
                self._apply(dao, change, loader)
            except Exception as exc:
                stats.record_failure(change.path, exc)
            else:
                stats.increment(change.kind, change.path)

        LOGGER.info(
            "Indexed notes: %d added, %d modified, %d unchanged, %d removed, %d failed",
            stats.added,
            stats.modified,
            stats.unchanged,
            stats.removed,
            stats.failed,
        )
        return stats

    def index_notebook(self, root: Path, *, extensions: Iterable[str] = (".md",)) -> IndexStats:
        """Index every note under ``root`` in a single transaction."""
        root = Path(root)
        sources = iter_note_files(root, extensions=extensions)
        with self.store.transaction() as conn:
            return self.index(NoteDAO(conn), sources, lambda source: load_note(root, source))

    @staticmethod
    def _apply(dao: NoteDAO, change: Change, loader: NoteLoader) -> None:
        if change.kind is ChangeKind.REMOVE:
            dao.remove(change.path)
            return
        note = loader(change.source)
        if change.kind is ChangeKind.ADD:
            dao.add(note)
        else:
            dao.update(note)

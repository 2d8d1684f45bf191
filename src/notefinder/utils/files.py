"""Utility helpers for working with files."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator

from notefinder.models import FileMetadata


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def iter_note_files(root: Path, *, extensions: Iterable[str] = (".md",)) -> Iterator[FileMetadata]:
    """Yield note files under root, sorted by path, skipping hidden entries."""
    root = Path(root)
    suffixes = {ext.lower() for ext in extensions}
    for item in sorted(root.rglob("*")):
        relative = item.relative_to(root)
        if _is_hidden(relative):
            continue
        if item.is_file() and item.suffix.lower() in suffixes:
            yield FileMetadata(
                path=relative.as_posix(),
                modified=datetime.fromtimestamp(item.stat().st_mtime, tz=timezone.utc),
            )


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()

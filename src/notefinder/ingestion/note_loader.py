"""Load note files into index records.

A note's title is its leading ATX heading (``# Title``); everything after
it is the body. Notes without a leading heading have an empty title.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Tuple

from notefinder.models import FileMetadata, NoteMetadata
from notefinder.utils.files import compute_sha256
from notefinder.utils.text import count_words

LOGGER = logging.getLogger(__name__)


def parse_note(text: str) -> Tuple[str, str]:
    """Split raw note text into ``(title, body)``."""
    lines = text.splitlines()
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("# "):
            title = stripped[2:].strip()
            return title, "\n".join(lines[index + 1 :]).strip()
        break
    return "", text.strip()


def _created_time(path: Path) -> datetime:
    stat = path.stat()
    # st_birthtime is only available on some platforms (macOS, BSD, Windows).
    timestamp = getattr(stat, "st_birthtime", None) or stat.st_mtime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def load_note(root: Path, file: FileMetadata) -> NoteMetadata:
    """Read ``file`` from the notebook at ``root`` and build its metadata."""
    path = Path(root) / file.path
    LOGGER.debug("Loading note %s", path)
    text = path.read_text(encoding="utf-8")
    title, body = parse_note(text)
    return NoteMetadata(
        path=file.path,
        title=title,
        body=body,
        word_count=count_words(body),
        checksum=compute_sha256(path),
        created=_created_time(path),
        modified=file.modified,
    )

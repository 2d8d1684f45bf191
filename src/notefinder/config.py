"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

DEFAULT_DB_PATH = Path(".notefinder") / "index.db"


@dataclass(slots=True)
class AppConfig:
    db_path: Path | None = None
    extensions: Tuple[str, ...] = (".md",)
    snippet_tokens: int = 20

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = DEFAULT_DB_PATH

    def resolve_db_path(self, notebook_dir: Path | None = None) -> Path:
        """Resolve the database path, relative paths being inside the notebook."""
        if self.db_path is None:
            self.db_path = DEFAULT_DB_PATH
        if Path(self.db_path).is_absolute() or notebook_dir is None:
            return Path(self.db_path)
        return Path(notebook_dir) / self.db_path

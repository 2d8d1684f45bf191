"""Command line interface for notefinder."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from notefinder.config import AppConfig
from notefinder.errors import NoteIndexError
from notefinder.index.filters import (
    DateDirection,
    DateField,
    DateFilter,
    ExcludePathFilter,
    Filter,
    MatchFilter,
    PathFilter,
)
from notefinder.index.indexer import Indexer
from notefinder.index.search import Finder
from notefinder.index.storage import SQLiteNoteStore
from notefinder.models import FinderOpts

MATCH_START = "<match>"
MATCH_END = "</match>"
DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]

console = Console()
app = typer.Typer(help="notefinder - index and search a directory of notes")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_db_parent(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _highlight(snippet: str) -> str:
    text = escape(snippet.replace("\n", " "))
    return text.replace(MATCH_START, "[bold yellow]").replace(MATCH_END, "[/bold yellow]")


def _build_filters(
    match: Optional[str],
    paths: List[str],
    excludes: List[str],
    dates: List[tuple[Optional[datetime], DateField, DateDirection]],
) -> List[Filter]:
    filters: List[Filter] = []
    if match:
        filters.append(MatchFilter(match))
    if paths:
        filters.append(PathFilter(paths))
    if excludes:
        filters.append(ExcludePathFilter(excludes))
    for date, field, direction in dates:
        if date is not None:
            filters.append(DateFilter(date=date, field=field, direction=direction))
    return filters


@app.command()
def index(
    notebook: Path = typer.Argument(
        Path("."), help="Notebook directory to index.", file_okay=False, resolve_path=True
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Synchronize the index with the notes found in NOTEBOOK."""
    _setup_logging(verbose)
    if not notebook.is_dir():
        raise typer.BadParameter(f"Notebook not found: {notebook}")

    config = AppConfig(db_path=db)
    resolved_db = config.resolve_db_path(notebook)
    _ensure_db_parent(resolved_db)

    store = SQLiteNoteStore(resolved_db)
    indexer = Indexer(store)

    console.print(f"Indexing into [bold]{resolved_db}[/bold]...")
    try:
        stats = indexer.index_notebook(notebook, extensions=config.extensions)
    finally:
        store.close()

    console.print(
        f"Added: {stats.added}, modified: {stats.modified}, "
        f"unchanged: {stats.unchanged}, removed: {stats.removed}, failed: {stats.failed}"
    )
    for note_path, error in stats.errors.items():
        message = str(error) if isinstance(error, NoteIndexError) else f"{note_path}: {error}"
        console.print(f"[red]{escape(message)}[/red]")
    if stats.failed:
        raise typer.Exit(code=1)


@app.command("list")
def list_notes(
    notebook: Path = typer.Option(
        Path("."), "--notebook", "-N", help="Notebook directory", file_okay=False, resolve_path=True
    ),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    match: Optional[str] = typer.Option(None, "--match", "-m", help="Full-text query"),
    path: List[str] = typer.Option([], "--path", "-p", help="Only notes under this path or glob"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Skip notes under this path or glob"),
    created_before: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    created_on: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    created_after: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    modified_before: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    modified_on: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    modified_after: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS),
    limit: int = typer.Option(0, "--limit", "-n", min=0, help="Maximum number of notes (0 = all)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List indexed notes matching the given filters."""
    _setup_logging(verbose)
    config = AppConfig(db_path=db)
    resolved_db = config.resolve_db_path(notebook)

    if not resolved_db.exists():
        raise typer.BadParameter(f"Database not found: {resolved_db}")

    filters = _build_filters(
        match,
        path,
        exclude,
        [
            (created_before, DateField.CREATED, DateDirection.BEFORE),
            (created_on, DateField.CREATED, DateDirection.ON),
            (created_after, DateField.CREATED, DateDirection.AFTER),
            (modified_before, DateField.MODIFIED, DateDirection.BEFORE),
            (modified_on, DateField.MODIFIED, DateDirection.ON),
            (modified_after, DateField.MODIFIED, DateDirection.AFTER),
        ],
    )

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path")
    table.add_column("Title")
    table.add_column("Snippet")

    store = SQLiteNoteStore(resolved_db)
    finder = Finder(
        store.connection,
        snippet_tokens=config.snippet_tokens,
        match_start=MATCH_START,
        match_end=MATCH_END,
    )
    try:
        count = finder.find(
            FinderOpts(filters=filters, limit=limit),
            lambda m: table.add_row(escape(m.path), escape(m.metadata.title), _highlight(m.snippet)),
        )
    except NoteIndexError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    finally:
        store.close()

    if not count:
        console.print("[yellow]No matches found.[/yellow]")
        return

    console.print(table)
    console.print(f"{count} note{'s' if count != 1 else ''}")

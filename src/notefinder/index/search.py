"""Full-text search and filtering over the note index."""

from __future__ import annotations

import sqlite3
from typing import Callable, Iterator, List

from notefinder.errors import QueryError
from notefinder.index.dao import row_to_note
from notefinder.index.filters import CompiledFilters, compile_filters
from notefinder.models import FinderOpts, Match
from notefinder.utils.text import leading_text

# Relevance weights for the notes_fts columns: path, title, body.
BM25_WEIGHTS = (1000.0, 500.0, 1.0)
SNIPPET_BODY_COLUMN = 2


class Finder:
    """Compile ``FinderOpts`` into a single SQLite query and run it."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        snippet_tokens: int = 20,
        match_start: str = "<match>",
        match_end: str = "</match>",
    ) -> None:
        self.conn = conn
        self.snippet_tokens = snippet_tokens
        self.match_start = match_start
        self.match_end = match_end

    def find(self, opts: FinderOpts, visit: Callable[[Match], None]) -> int:
        """Pass every matching note to ``visit`` and return how many were visited.

        An exception raised by ``visit`` stops the iteration and propagates.
        """
        count = 0
        for match in self.iter_matches(opts):
            visit(match)
            count += 1
        return count

    def find_all(self, opts: FinderOpts) -> List[Match]:
        matches: List[Match] = []
        self.find(opts, matches.append)
        return matches

    def iter_matches(self, opts: FinderOpts) -> Iterator[Match]:
        compiled = compile_filters(opts.filters)
        query, params = self._build_query(compiled, opts.limit)
        context = self._describe(compiled)

        try:
            cursor = self.conn.execute(query, params)
        except sqlite3.Error as exc:
            raise QueryError(context) from exc

        while True:
            try:
                row = cursor.fetchone()
            except sqlite3.Error as exc:
                raise QueryError(context) from exc
            if row is None:
                return
            yield self._to_match(row, highlighted=compiled.joins_fts)

    def count(self, opts: FinderOpts) -> int:
        """Number of notes matching the filters, ignoring the limit."""
        compiled = compile_filters(opts.filters)
        query = f"""
            SELECT COUNT(*)
              FROM notes n
            {self._fts_join(compiled)}
            {compiled.where_clause()}
        """
        try:
            return self.conn.execute(query, compiled.params).fetchone()[0]
        except sqlite3.Error as exc:
            raise QueryError(self._describe(compiled)) from exc

    def _build_query(self, compiled: CompiledFilters, limit: int) -> tuple[str, list]:
        params: list = []
        if compiled.joins_fts:
            snippet = "snippet(notes_fts, ?, ?, ?, '…', ?)"
            params.extend(
                [SNIPPET_BODY_COLUMN, self.match_start, self.match_end, self.snippet_tokens]
            )
            weights = ", ".join(str(weight) for weight in BM25_WEIGHTS)
            order = f"bm25(notes_fts, {weights}), n.id"
        else:
            snippet = "NULL"
            order = "n.id"
        params.extend(compiled.params)

        query = f"""
            SELECT n.id, n.path, n.title, n.body, n.word_count, n.checksum,
                   n.created, n.modified, {snippet} AS snippet
              FROM notes n
            {self._fts_join(compiled)}
            {compiled.where_clause()}
             ORDER BY {order}
        """
        if limit > 0:
            query += " LIMIT ?"
            params.append(limit)
        return query, params

    @staticmethod
    def _fts_join(compiled: CompiledFilters) -> str:
        if compiled.joins_fts:
            return "JOIN notes_fts ON notes_fts.rowid = n.id"
        return ""

    @staticmethod
    def _describe(compiled: CompiledFilters) -> str:
        if compiled.match_query:
            return f"query {compiled.match_query!r}"
        return "note filters"

    def _to_match(self, row: sqlite3.Row, *, highlighted: bool) -> Match:
        note = row_to_note(row)
        if highlighted:
            snippet = row["snippet"] or ""
        else:
            snippet = leading_text(note.body, max_words=self.snippet_tokens)
        return Match(metadata=note, snippet=snippet)

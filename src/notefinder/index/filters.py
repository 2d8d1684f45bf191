"""Query filters and their compilation to SQL.

Each filter kind contributes one ``WHERE`` fragment with bound parameters.
Fragments are AND-ed together; the patterns inside a single path filter are
OR-ed. User values never reach the SQL text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, List, Sequence, Tuple, Union

from notefinder.index.storage import to_db_timestamp


class DateField(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"


class DateDirection(str, Enum):
    BEFORE = "before"
    ON = "on"
    AFTER = "after"


@dataclass(frozen=True, slots=True)
class MatchFilter:
    """Full-text query in FTS5 syntax; a bare ``|`` is accepted for ``OR``."""

    query: str


@dataclass(frozen=True, slots=True)
class PathFilter:
    patterns: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", tuple(self.patterns))


@dataclass(frozen=True, slots=True)
class ExcludePathFilter:
    patterns: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", tuple(self.patterns))


@dataclass(frozen=True, slots=True)
class DateFilter:
    date: datetime
    field: DateField
    direction: DateDirection


Filter = Union[MatchFilter, PathFilter, ExcludePathFilter, DateFilter]

_DATE_COLUMNS = {
    DateField.CREATED: "n.created",
    DateField.MODIFIED: "n.modified",
}

_PIPE = re.compile(r"\s*\|\s*")


@dataclass(slots=True)
class CompiledFilters:
    """SQL pieces produced from a list of filters."""

    where: List[str] = field(default_factory=list)
    params: List[Any] = field(default_factory=list)
    match_query: str | None = None

    @property
    def joins_fts(self) -> bool:
        return self.match_query is not None

    def where_clause(self) -> str:
        if not self.where:
            return ""
        return "WHERE " + "\n   AND ".join(f"({expr})" for expr in self.where)


def to_fts_query(query: str) -> str:
    """Rewrite bare ``|`` separators as FTS5 ``OR``, leaving quoted phrases alone."""
    parts = query.split('"')
    # Even indices are outside double quotes.
    for idx in range(0, len(parts), 2):
        parts[idx] = _PIPE.sub(" OR ", parts[idx])
    return '"'.join(parts).strip()


def _escape_glob(pattern: str) -> str:
    return pattern.replace("[", "[[]").replace("?", "[?]")


def _glob_patterns(pattern: str) -> List[str]:
    pattern = pattern.rstrip("/")
    # A pattern without "*" is a literal path.
    if "*" not in pattern:
        pattern = _escape_glob(pattern)
    return [pattern, pattern + "/*"]


def _path_expr(patterns: Sequence[str]) -> Tuple[str, List[str]]:
    exprs: List[str] = []
    params: List[str] = []
    for pattern in patterns:
        for glob in _glob_patterns(pattern):
            exprs.append("n.path GLOB ?")
            params.append(glob)
    return " OR ".join(exprs), params


def _day_bounds(value: datetime) -> Tuple[datetime, datetime]:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    start = value.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def compile_filters(filters: Iterable[Filter]) -> CompiledFilters:
    compiled = CompiledFilters()
    match_queries: List[str] = []

    for item in filters:
        if isinstance(item, MatchFilter):
            query = to_fts_query(item.query)
            if query:
                match_queries.append(query)

        elif isinstance(item, PathFilter):
            if not item.patterns:
                continue
            expr, params = _path_expr(item.patterns)
            compiled.where.append(expr)
            compiled.params.extend(params)

        elif isinstance(item, ExcludePathFilter):
            if not item.patterns:
                continue
            expr, params = _path_expr(item.patterns)
            compiled.where.append(f"NOT ({expr})")
            compiled.params.extend(params)

        elif isinstance(item, DateFilter):
            column = _DATE_COLUMNS[DateField(item.field)]
            direction = DateDirection(item.direction)
            if direction is DateDirection.ON:
                start, end = _day_bounds(item.date)
                compiled.where.append(f"{column} >= ? AND {column} < ?")
                compiled.params.extend([to_db_timestamp(start), to_db_timestamp(end)])
            elif direction is DateDirection.BEFORE:
                compiled.where.append(f"{column} < ?")
                compiled.params.append(to_db_timestamp(item.date))
            else:
                compiled.where.append(f"{column} > ?")
                compiled.params.append(to_db_timestamp(item.date))

        else:
            raise TypeError(f"Unsupported filter: {item!r}")

    if match_queries:
        if len(match_queries) == 1:
            compiled.match_query = match_queries[0]
        else:
            compiled.match_query = " AND ".join(f"({query})" for query in match_queries)
        compiled.where.insert(0, "notes_fts MATCH ?")
        compiled.params.insert(0, compiled.match_query)

    return compiled

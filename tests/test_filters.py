"""Tests for filter compilation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from notefinder.index.filters import (
    DateDirection,
    DateField,
    DateFilter,
    ExcludePathFilter,
    MatchFilter,
    PathFilter,
    compile_filters,
    to_fts_query,
)


class TestToFtsQuery:
    """Test rewriting of match queries."""

    def test_pipe_becomes_or(self) -> None:
        """Should rewrite a spaced pipe as OR."""
        assert to_fts_query("daily | index") == "daily OR index"

    def test_pipe_without_spaces(self) -> None:
        """Should rewrite a pipe between words as OR."""
        assert to_fts_query("daily|index") == "daily OR index"

    def test_native_syntax_is_kept(self) -> None:
        """Should leave FTS5 operators and phrases untouched."""
        assert to_fts_query('daily OR "second note" NOT third') == (
            'daily OR "second note" NOT third'
        )

    def test_pipe_inside_phrase_is_kept(self) -> None:
        """Should not rewrite pipes inside double quotes."""
        assert to_fts_query('"a | b" | c') == '"a | b" OR c'


class TestCompileFilters:
    """Test compile_filters output."""

    def test_no_filters(self) -> None:
        """Should produce no WHERE clause."""
        compiled = compile_filters([])

        assert compiled.where == []
        assert compiled.params == []
        assert compiled.where_clause() == ""
        assert not compiled.joins_fts

    def test_match_filter(self) -> None:
        """Should join the FTS table and bind the query."""
        compiled = compile_filters([MatchFilter("daily | index")])

        assert compiled.joins_fts
        assert compiled.match_query == "daily OR index"
        assert compiled.where == ["notes_fts MATCH ?"]
        assert compiled.params == ["daily OR index"]

    def test_blank_match_filter_is_ignored(self) -> None:
        """Should skip whitespace-only queries."""
        compiled = compile_filters([MatchFilter("   ")])

        assert not compiled.joins_fts
        assert compiled.where == []

    def test_several_match_filters_are_and_ed(self) -> None:
        """Should combine match filters into one FTS query."""
        compiled = compile_filters([MatchFilter("daily"), MatchFilter("a | b")])

        assert compiled.match_query == "(daily) AND (a OR b)"
        assert compiled.where == ["notes_fts MATCH ?"]

    def test_match_parameter_comes_first(self) -> None:
        """Should place the MATCH condition before other filters."""
        compiled = compile_filters([PathFilter(["log"]), MatchFilter("daily")])

        assert compiled.where[0] == "notes_fts MATCH ?"
        assert compiled.params[0] == "daily"
        assert compiled.params[1:] == ["log", "log/*"]

    def test_path_filter_or_within(self) -> None:
        """Should OR the patterns of a single path filter."""
        compiled = compile_filters([PathFilter(["ref", "index.md"])])

        assert compiled.where == [
            "n.path GLOB ? OR n.path GLOB ? OR n.path GLOB ? OR n.path GLOB ?"
        ]
        assert compiled.params == ["ref", "ref/*", "index.md", "index.md/*"]

    def test_path_filter_strips_trailing_slash(self) -> None:
        """Should treat 'ref/' like 'ref'."""
        compiled = compile_filters([PathFilter(["ref/"])])

        assert compiled.params == ["ref", "ref/*"]

    def test_literal_path_escapes_glob_characters(self) -> None:
        """Should escape brackets and '?' in patterns without '*'."""
        compiled = compile_filters([PathFilter(["drafts/[wip]?.md"])])

        assert compiled.params == ["drafts/[[]wip][?].md", "drafts/[[]wip][?].md/*"]

    def test_wildcard_pattern_is_not_escaped(self) -> None:
        """Should pass patterns containing '*' through as globs."""
        compiled = compile_filters([PathFilter(["log/2021-0[12]-*"])])

        assert compiled.params == ["log/2021-0[12]-*", "log/2021-0[12]-*/*"]

    def test_exclude_path_filter(self) -> None:
        """Should negate the OR-ed patterns."""
        compiled = compile_filters([ExcludePathFilter(["log"])])

        assert compiled.where == ["NOT (n.path GLOB ? OR n.path GLOB ?)"]
        assert compiled.params == ["log", "log/*"]

    def test_empty_path_lists_are_ignored(self) -> None:
        """Should contribute nothing for empty pattern lists."""
        compiled = compile_filters([PathFilter([]), ExcludePathFilter([])])

        assert compiled.where == []

    def test_patterns_are_stored_as_tuple(self) -> None:
        """Should freeze pattern lists."""
        assert PathFilter(["a", "b"]).patterns == ("a", "b")

    @pytest.mark.parametrize(
        "direction, expr",
        [
            (DateDirection.BEFORE, "n.created < ?"),
            (DateDirection.AFTER, "n.created > ?"),
        ],
    )
    def test_strict_date_filters(self, direction, expr) -> None:
        """Should compare strictly for before and after."""
        date = datetime(2020, 11, 22, 10, 12, 45, tzinfo=timezone.utc)
        compiled = compile_filters([DateFilter(date, DateField.CREATED, direction)])

        assert compiled.where == [expr]
        assert compiled.params == ["2020-11-22T10:12:45.000000Z"]

    def test_date_on_covers_whole_day(self) -> None:
        """Should bound 'on' by the start of the day and the next day."""
        date = datetime(2020, 11, 22, 10, 12, 45, tzinfo=timezone.utc)
        compiled = compile_filters([DateFilter(date, DateField.MODIFIED, DateDirection.ON)])

        assert compiled.where == ["n.modified >= ? AND n.modified < ?"]
        assert compiled.params == [
            "2020-11-22T00:00:00.000000Z",
            "2020-11-23T00:00:00.000000Z",
        ]

    def test_filters_are_and_ed(self) -> None:
        """Should AND separate filters in the WHERE clause."""
        date = datetime(2020, 1, 1, tzinfo=timezone.utc)
        compiled = compile_filters(
            [
                PathFilter(["log"]),
                DateFilter(date, DateField.CREATED, DateDirection.AFTER),
            ]
        )

        assert compiled.where_clause() == (
            "WHERE (n.path GLOB ? OR n.path GLOB ?)\n   AND (n.created > ?)"
        )

    def test_user_values_never_reach_sql(self) -> None:
        """Should bind user values as parameters."""
        compiled = compile_filters([PathFilter(["x'; DROP TABLE notes; --"])])

        assert "DROP" not in compiled.where_clause()
        assert compiled.params[0] == "x'; DROP TABLE notes; --"

    def test_unknown_filter(self) -> None:
        """Should reject objects that are not filters."""
        with pytest.raises(TypeError):
            compile_filters(["not a filter"])

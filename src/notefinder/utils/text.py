"""Text helpers for note bodies."""

from __future__ import annotations

import re

_WORD = re.compile(r"\S+")


def count_words(text: str) -> int:
    """Count whitespace separated words."""
    return len(_WORD.findall(text))


def leading_text(text: str, *, max_words: int = 20, ellipsis: str = "…") -> str:
    """Return the first ``max_words`` words of text on a single line.

    An ellipsis is appended when words were dropped.
    """
    words = _WORD.findall(text)
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + ellipsis

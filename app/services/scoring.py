"""Theme scoring via word-boundary keyword matching.

Each keyword pattern is anchored on the left only, so ``work`` matches
"work" and "working" but never "homework".  Scores are deterministic for a
given (text, themes) pair.

Scoring per theme:

- +1 for every match of every keyword in the full text
- +1 per keyword that also matches inside the first sentence
- +2 when the theme name (hyphens as spaces) appears in the text
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache

from app.core.constants import (
    FIRST_SENTENCE_BONUS,
    KEYWORD_MATCH_POINTS,
    THEME_NAME_BONUS,
)
from app.models.theme import Theme, ThemeScore

_SENTENCE_TERMINATOR = re.compile(r"[.!?]")


@lru_cache(maxsize=1024)
def keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile ``\\b<keyword>\\w*\\b`` for a keyword (case-insensitive)."""
    return re.compile(
        rf"\b{re.escape(keyword.lower())}\w*\b",
        re.IGNORECASE | re.ASCII,
    )


def first_sentence(text: str) -> str:
    """Return the text up to the first ``.``, ``!`` or ``?``."""
    return _SENTENCE_TERMINATOR.split(text, maxsplit=1)[0]


def score_theme(text: str, opening: str, theme: Theme) -> ThemeScore:
    """Score one theme against lower-cased ``text`` and its first sentence."""
    score = 0
    matched_keywords: list[str] = []

    for keyword in theme.keywords:
        pattern = keyword_pattern(keyword)
        occurrences = len(pattern.findall(text))
        if occurrences == 0:
            continue

        if keyword not in matched_keywords:
            matched_keywords.append(keyword)
        score += occurrences * KEYWORD_MATCH_POINTS

        if pattern.search(opening):
            score += FIRST_SENTENCE_BONUS

    if theme.name.lower().replace("-", " ") in text:
        score += THEME_NAME_BONUS

    return ThemeScore(theme=theme, score=score, matched_keywords=matched_keywords)


def score_themes(text: str, themes: Sequence[Theme]) -> list[ThemeScore]:
    """Score every theme, returning results in the same order as ``themes``."""
    lowered = text.lower()
    opening = first_sentence(lowered)
    return [score_theme(lowered, opening, theme) for theme in themes]

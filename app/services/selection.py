"""Selection policy: how many top-scoring themes to surface.

A monotone staircase over the score distribution: more strong matches
surface more themes, bounded to 3..6.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.core.constants import (
    MAX_THEME_COUNT,
    MEDIUM_MATCH_SCORE,
    MIN_THEME_COUNT,
    STRONG_MATCH_SCORE,
)
from app.models.theme import ThemeScore, ThemeSelection


def rank_scores(scores: Sequence[ThemeScore]) -> list[ThemeScore]:
    """Sort by score descending; ties keep catalog order (sort is stable)."""
    return sorted(scores, key=lambda s: s.score, reverse=True)


def determine_theme_count(scores: Sequence[ThemeScore]) -> int:
    """Return 3..6 depending on how many strong and medium matches exist."""
    strong = sum(1 for s in scores if s.score >= STRONG_MATCH_SCORE)
    medium = sum(1 for s in scores if s.score >= MEDIUM_MATCH_SCORE)

    if strong >= 4:
        return MAX_THEME_COUNT
    if strong >= 3 or medium >= 5:
        return 5
    if strong >= 2 or medium >= 3:
        return 4
    return MIN_THEME_COUNT


def recommended_count_for(theme_count: int) -> int:
    return max(MIN_THEME_COUNT, theme_count - 1)


def select_themes(scores: Sequence[ThemeScore]) -> ThemeSelection:
    """Pick the top themes and the count the user is asked to choose."""
    ranked = rank_scores(scores)
    theme_count = determine_theme_count(ranked)
    return ThemeSelection(
        themes=[s.theme for s in ranked[:theme_count]],
        theme_count=theme_count,
        recommended_count=recommended_count_for(theme_count),
    )

"""Pydantic models for the ``themes`` table and per-request scoring results."""

from pydantic import BaseModel, ConfigDict, Field


class Theme(BaseModel):
    """Catalog entry loaded from the theme store.

    Identity is ``name``; instances are immutable once loaded.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str | None = Field(default=None, exclude=True)
    name: str
    title: str
    summary: str
    keywords: list[str] = Field(default_factory=list)
    emoji: str
    category: str


class ThemeScore(BaseModel):
    """Match score of one theme against one reflection. Never persisted."""
    theme: Theme
    score: int = Field(default=0, ge=0)
    matched_keywords: list[str] = Field(default_factory=list)


class ThemeSelection(BaseModel):
    """Themes chosen for display, highest score first."""
    themes: list[Theme]
    theme_count: int = Field(..., ge=3, le=6)
    recommended_count: int = Field(..., ge=3, le=5)

"""Pydantic models for the ``user_profiles`` analysis columns."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserAnalysisState(BaseModel):
    """Last analyzed reflection for a user (one row per user)."""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    onboarding_self_reflection: str | None = None
    themes_analyzed_at: datetime | None = None


class ResubmissionCheck(BaseModel):
    """Outcome of comparing a new reflection with the previous one."""
    changed: bool
    similarity: float = Field(..., ge=0.0, le=1.0)

"""Request and response bodies for the ``new-user-insights`` endpoint.

Field names are camelCase on the wire to match the mobile client.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from app.models.enums import ErrorCode
from app.models.theme import Theme


class AnalysisRequest(BaseModel):
    """Incoming self-reflection submission."""
    self_reflection_text: StrictStr = Field(
        ..., alias="selfReflectionText", min_length=1
    )


class AnalysisResponse(BaseModel):
    """Successful analysis result."""
    model_config = ConfigDict(populate_by_name=True)

    themes: list[Theme]
    recommended_count: int = Field(..., alias="recommendedCount", ge=3, le=5)
    analyzed_at: datetime = Field(..., alias="analyzedAt")
    theme_count: int = Field(..., alias="themeCount", ge=3, le=6)


class ErrorResponse(BaseModel):
    """Error payload: short message plus machine-readable code."""
    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: ErrorCode
    retry_after: datetime | None = Field(default=None, alias="retryAfter")

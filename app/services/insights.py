"""Self-reflection theme analysis pipeline.

Runs an authenticated submission through validation, the resubmission
check, scoring, selection and persistence:

    validating -> scoring -> persisting -> responded

Any ``InsightsError`` moves the request to ``failed``.  Persisting is
best-effort and never fails the request.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.core.config import settings
from app.core.errors import InsightsError
from app.core.logging import mask_user_id
from app.models.enums import AnalysisStage
from app.models.insights import AnalysisResponse
from app.services.auth import AuthenticatedUser
from app.services.catalog import ThemeCatalog
from app.services.idempotency import (
    check_resubmission,
    enforce_rate_limit,
    fetch_user_state,
    persist_analysis,
)
from app.services.sanitizer import sanitize_reflection_text
from app.services.scoring import score_themes
from app.services.selection import rank_scores, select_themes

logger = logging.getLogger(__name__)


def _enter(stage: AnalysisStage, user_id: str) -> AnalysisStage:
    logger.debug(
        "analysis_stage",
        extra={"stage": stage.value, "user": mask_user_id(user_id)},
    )
    return stage


def analyze_self_reflection(
    user: AuthenticatedUser,
    raw_text: str,
    catalog: ThemeCatalog,
    *,
    rate_limit_hours: float | None = None,
    now: datetime | None = None,
) -> AnalysisResponse:
    """Score ``raw_text`` against the catalog and record the analysis.

    Parameters
    ----------
    user:
        Authenticated caller; its client is used for profile reads/writes.
    raw_text:
        Untrusted ``selfReflectionText`` from the request body.
    catalog:
        Theme catalog shared across requests.
    rate_limit_hours:
        Overrides ``settings.RATE_LIMIT_HOURS``.
    now:
        Analysis timestamp, defaults to the current UTC time.
    """
    window = settings.RATE_LIMIT_HOURS if rate_limit_hours is None else rate_limit_hours
    stage = _enter(AnalysisStage.validating, user.user_id)

    try:
        sanitized = sanitize_reflection_text(raw_text)
        logger.info("input_validated", extra={"length": len(sanitized)})

        state = fetch_user_state(user.client, user.user_id)
        check = check_resubmission(
            sanitized, state.onboarding_self_reflection if state else None
        )
        if state is not None and state.themes_analyzed_at and state.onboarding_self_reflection:
            logger.info(
                "reflection_changed" if check.changed else "reflection_similar",
                extra={"similarity": round(check.similarity, 3)},
            )

        analyzed_at = now or datetime.now(timezone.utc)
        enforce_rate_limit(state, check, analyzed_at, window)

        stage = _enter(AnalysisStage.scoring, user.user_id)
        themes = catalog.get()
        scores = score_themes(sanitized, themes)
        logger.info(
            "themes_scored",
            extra={
                "top_scores": [
                    f"{s.theme.name}({s.score})" for s in rank_scores(scores)[:3]
                ]
            },
        )
        selection = select_themes(scores)
        logger.info(
            "themes_selected",
            extra={
                "theme_count": selection.theme_count,
                "recommended_count": selection.recommended_count,
            },
        )
    except InsightsError as exc:
        logger.warning(
            "analysis_failed",
            extra={
                "stage": stage.value,
                "next_stage": AnalysisStage.failed.value,
                "code": exc.code.value,
            },
        )
        raise

    _enter(AnalysisStage.persisting, user.user_id)
    persist_analysis(user.client, user.user_id, sanitized, analyzed_at)

    _enter(AnalysisStage.responded, user.user_id)
    return AnalysisResponse(
        themes=selection.themes,
        recommended_count=selection.recommended_count,
        analyzed_at=analyzed_at,
        theme_count=selection.theme_count,
    )

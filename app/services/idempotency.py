"""Resubmission detection, rate limiting and analysis persistence.

The last analyzed reflection is stored on the user's ``user_profiles`` row.
A new submission is compared with it by Jaccard similarity over word sets;
when ``RATE_LIMIT_HOURS`` is 0 the comparison is informational only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from supabase import Client

from app.core.constants import SIMILARITY_THRESHOLD, USER_PROFILES_TABLE
from app.core.errors import ProfileError, RateLimitedError
from app.core.logging import mask_user_id
from app.models.enums import ErrorCode
from app.models.profile import ResubmissionCheck, UserAnalysisState

logger = logging.getLogger(__name__)


def _word_set(text: str) -> set[str]:
    return set(text.lower().split())


def calculate_similarity(text1: str, text2: str | None) -> float:
    """Jaccard index of the lower-cased whitespace-separated words.

    Returns 0.0 when there is no previous text and 1.0 when both texts
    contain no words at all.
    """
    if text2 is None:
        return 0.0

    words1 = _word_set(text1)
    words2 = _word_set(text2)
    union = words1 | words2
    if not union:
        return 1.0
    return len(words1 & words2) / len(union)


def check_resubmission(new_text: str, prior_text: str | None) -> ResubmissionCheck:
    """Decide whether ``new_text`` differs materially from ``prior_text``."""
    similarity = calculate_similarity(new_text, prior_text)
    return ResubmissionCheck(
        changed=similarity < SIMILARITY_THRESHOLD,
        similarity=similarity,
    )


def fetch_user_state(client: Client, user_id: str) -> UserAnalysisState | None:
    """Return the caller's last analysis state, or None if never analyzed.

    Raises ``ProfileError`` when the store cannot be read.
    """
    try:
        result = (
            client.table(USER_PROFILES_TABLE)
            .select("user_id, onboarding_self_reflection, themes_analyzed_at")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "profile_fetch_failed",
            extra={"user": mask_user_id(user_id), "error_message": str(exc)},
        )
        raise ProfileError() from exc

    rows = result.data or []
    if not rows:
        return None
    return UserAnalysisState.model_validate(rows[0])


def enforce_rate_limit(
    state: UserAnalysisState | None,
    check: ResubmissionCheck,
    now: datetime,
    window_hours: float,
) -> None:
    """Reject an unchanged resubmission inside the rate-limit window.

    A ``window_hours`` of 0 disables enforcement.
    """
    if window_hours <= 0 or state is None or state.themes_analyzed_at is None:
        return
    if check.changed:
        return

    retry_after = state.themes_analyzed_at + timedelta(hours=window_hours)
    if now < retry_after:
        raise RateLimitedError(retry_after=retry_after)


def persist_analysis(
    client: Client,
    user_id: str,
    sanitized_text: str,
    analyzed_at: datetime,
) -> bool:
    """Upsert the analyzed text and timestamp for ``user_id``.

    Failures are logged and swallowed: the themes have already been
    computed and are returned regardless.  Returns True on success.
    """
    try:
        client.table(USER_PROFILES_TABLE).upsert(
            {
                "user_id": user_id,
                "onboarding_self_reflection": sanitized_text,
                "themes_analyzed_at": analyzed_at.isoformat(),
            },
            on_conflict="user_id",
        ).execute()
    except Exception as exc:
        logger.error(
            "analysis_persist_failed",
            extra={
                "user": mask_user_id(user_id),
                "code": ErrorCode.persist_failed.value,
                "error_message": str(exc),
            },
        )
        return False

    logger.info("analysis_persisted", extra={"user": mask_user_id(user_id)})
    return True

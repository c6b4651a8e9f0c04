"""Unit tests for resubmission detection, rate limiting and persistence."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.core.errors import ProfileError, RateLimitedError
from app.models.profile import ResubmissionCheck, UserAnalysisState
from app.services.idempotency import (
    calculate_similarity,
    check_resubmission,
    enforce_rate_limit,
    fetch_user_state,
    persist_analysis,
)

USER_ID = "3f2c9a1e-5b7d-4c2a-9e8f-1a2b3c4d5e6f"
NOW = datetime(2025, 1, 20, 12, 0, tzinfo=timezone.utc)


def _chainable_table_mock() -> MagicMock:
    m = MagicMock()
    for method in ("select", "upsert", "eq", "limit"):
        getattr(m, method).return_value = m
    return m


class TestCalculateSimilarity:

    def test_identical_text_is_one(self) -> None:
        assert calculate_similarity("I feel tired", "I feel tired") == 1.0

    def test_case_and_spacing_ignored(self) -> None:
        assert calculate_similarity("I  feel\nTIRED", "i feel tired") == 1.0

    def test_absent_prior_is_zero(self) -> None:
        assert calculate_similarity("I feel tired", None) == 0.0

    def test_partial_overlap(self) -> None:
        # {a, b, c} vs {b, c, d}: 2 / 4
        assert calculate_similarity("a b c", "b c d") == 0.5

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("work is hard", "hard work pays"),
            ("lonely nights", "I sleep badly at night"),
            ("same same", "same"),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert calculate_similarity(a, b) == calculate_similarity(b, a)


class TestCheckResubmission:

    def test_first_submission_is_changed(self) -> None:
        check = check_resubmission("I feel tired", None)
        assert check.changed is True
        assert check.similarity == 0.0

    def test_same_text_is_unchanged(self) -> None:
        check = check_resubmission("I feel tired today", "i feel tired today")
        assert check.changed is False

    def test_threshold_is_strict(self) -> None:
        # 7 shared words out of 10 -> exactly 0.7 counts as unchanged
        prior = "one two three four five six seven eight nine ten"
        new = "one two three four five six seven"
        check = check_resubmission(new, prior)
        assert check.similarity == pytest.approx(0.7)
        assert check.changed is False


class TestEnforceRateLimit:

    def _state(self, hours_ago: float) -> UserAnalysisState:
        return UserAnalysisState(
            user_id=USER_ID,
            onboarding_self_reflection="I feel tired today",
            themes_analyzed_at=NOW - timedelta(hours=hours_ago),
        )

    def test_disabled_window_never_blocks(self) -> None:
        unchanged = ResubmissionCheck(changed=False, similarity=1.0)
        enforce_rate_limit(self._state(0.1), unchanged, NOW, window_hours=0)

    def test_unchanged_inside_window_is_rejected(self) -> None:
        unchanged = ResubmissionCheck(changed=False, similarity=1.0)
        with pytest.raises(RateLimitedError) as exc_info:
            enforce_rate_limit(self._state(2), unchanged, NOW, window_hours=24)
        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == NOW + timedelta(hours=22)

    def test_changed_text_inside_window_is_allowed(self) -> None:
        changed = ResubmissionCheck(changed=True, similarity=0.1)
        enforce_rate_limit(self._state(2), changed, NOW, window_hours=24)

    def test_unchanged_after_window_is_allowed(self) -> None:
        unchanged = ResubmissionCheck(changed=False, similarity=1.0)
        enforce_rate_limit(self._state(30), unchanged, NOW, window_hours=24)

    def test_no_prior_state_is_allowed(self) -> None:
        unchanged = ResubmissionCheck(changed=False, similarity=1.0)
        enforce_rate_limit(None, unchanged, NOW, window_hours=24)


class TestFetchUserState:

    def test_returns_none_without_row(self) -> None:
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[])
        client = MagicMock()
        client.table.return_value = table

        assert fetch_user_state(client, USER_ID) is None
        client.table.assert_called_once_with("user_profiles")
        table.eq.assert_called_once_with("user_id", USER_ID)

    def test_parses_existing_row(self) -> None:
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(
            data=[
                {
                    "user_id": USER_ID,
                    "onboarding_self_reflection": "I feel tired today",
                    "themes_analyzed_at": "2025-01-19T08:30:00+00:00",
                }
            ]
        )
        client = MagicMock()
        client.table.return_value = table

        state = fetch_user_state(client, USER_ID)

        assert state is not None
        assert state.onboarding_self_reflection == "I feel tired today"
        assert state.themes_analyzed_at == datetime(2025, 1, 19, 8, 30, tzinfo=timezone.utc)

    def test_store_error_raises_profile_error(self) -> None:
        table = _chainable_table_mock()
        table.execute.side_effect = Exception("permission denied")
        client = MagicMock()
        client.table.return_value = table

        with pytest.raises(ProfileError):
            fetch_user_state(client, USER_ID)


class TestPersistAnalysis:

    def test_upserts_keyed_by_user(self) -> None:
        table = _chainable_table_mock()
        client = MagicMock()
        client.table.return_value = table

        assert persist_analysis(client, USER_ID, "I feel tired today", NOW) is True

        table.upsert.assert_called_once_with(
            {
                "user_id": USER_ID,
                "onboarding_self_reflection": "I feel tired today",
                "themes_analyzed_at": NOW.isoformat(),
            },
            on_conflict="user_id",
        )

    def test_failure_is_swallowed(self) -> None:
        table = _chainable_table_mock()
        table.execute.side_effect = Exception("network down")
        client = MagicMock()
        client.table.return_value = table

        assert persist_analysis(client, USER_ID, "I feel tired today", NOW) is False

"""Enum types shared by the insights models and error taxonomy."""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in ``ErrorResponse.code``."""
    auth_required = "AUTH_REQUIRED"
    auth_failed = "AUTH_FAILED"
    method_not_allowed = "METHOD_NOT_ALLOWED"
    invalid_json = "INVALID_JSON"
    missing_text = "MISSING_TEXT"
    text_too_short = "TEXT_TOO_SHORT"
    text_too_long = "TEXT_TOO_LONG"
    insufficient_content = "INSUFFICIENT_CONTENT"
    profile_error = "PROFILE_ERROR"
    themes_error = "THEMES_ERROR"
    rate_limited = "RATE_LIMITED"
    persist_failed = "PERSIST_FAILED"
    internal_error = "INTERNAL_ERROR"


class AnalysisStage(str, Enum):
    """Lifecycle of a single analysis request."""
    unauthenticated = "unauthenticated"
    validating = "validating"
    scoring = "scoring"
    persisting = "persisting"
    responded = "responded"
    failed = "failed"

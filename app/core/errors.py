"""Error taxonomy for the theme analysis endpoint.

Every failure the caller can see is an ``InsightsError`` subclass carrying
an HTTP status, a machine-readable ``code`` and a short message.  Internal
detail (store errors, tracebacks) goes to the logs only.
"""

from __future__ import annotations

from datetime import datetime

from app.models.enums import ErrorCode


class InsightsError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.internal_error
    message: str = "Analysis failed. Please try again."

    def __init__(
        self,
        message: str | None = None,
        *,
        retry_after: datetime | None = None,
    ) -> None:
        if message is not None:
            self.message = message
        self.retry_after = retry_after
        super().__init__(self.message)


class AuthRequiredError(InsightsError):
    status_code = 401
    code = ErrorCode.auth_required
    message = "Missing authorization header"


class AuthFailedError(InsightsError):
    status_code = 401
    code = ErrorCode.auth_failed
    message = "Unauthorized"


class MethodNotAllowedError(InsightsError):
    status_code = 405
    code = ErrorCode.method_not_allowed
    message = "Method not allowed"


class InvalidJsonError(InsightsError):
    status_code = 400
    code = ErrorCode.invalid_json
    message = "Invalid JSON body"


class MissingTextError(InsightsError):
    status_code = 400
    code = ErrorCode.missing_text
    message = "Missing selfReflectionText field"


class TextValidationError(InsightsError):
    """Raised when sanitized reflection text fails a content check."""

    status_code = 400


class TextTooShortError(TextValidationError):
    code = ErrorCode.text_too_short
    message = "Text is too short"


class TextTooLongError(TextValidationError):
    status_code = 413
    code = ErrorCode.text_too_long
    message = "Text is too long"


class InsufficientContentError(TextValidationError):
    code = ErrorCode.insufficient_content
    message = "Text must contain meaningful content"


class ProfileError(InsightsError):
    code = ErrorCode.profile_error
    message = "Failed to fetch user profile"


class CatalogUnavailableError(InsightsError):
    code = ErrorCode.themes_error
    message = "Failed to load themes"


class RateLimitedError(InsightsError):
    status_code = 429
    code = ErrorCode.rate_limited
    message = "Themes were analyzed recently. Please try again later."


class InternalError(InsightsError):
    pass

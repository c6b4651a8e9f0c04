"""Self-reflection input sanitization.

Strips markup and enforces length and content-quality bounds before any
scoring happens.
"""

from __future__ import annotations

import re

from app.core.constants import MAX_TEXT_LENGTH, MIN_ALPHA_CHARS, MIN_TEXT_LENGTH
from app.core.errors import (
    InsufficientContentError,
    TextTooLongError,
    TextTooShortError,
)

_TAG_PATTERN = re.compile(r"<[^>]*>")
_ASCII_LETTER = re.compile(r"[a-zA-Z]")


def strip_markup(raw: str) -> str:
    """Remove HTML-like tags and surrounding whitespace."""
    return _TAG_PATTERN.sub("", raw).strip()


def sanitize_reflection_text(raw: str) -> str:
    """Return cleaned reflection text or raise a ``TextValidationError``.

    Checks run on the stripped text in order: minimum length, maximum
    length, then at least ``MIN_ALPHA_CHARS`` ASCII letters so that
    whitespace- or emoji-only submissions are rejected.
    """
    sanitized = strip_markup(raw)

    if len(sanitized) < MIN_TEXT_LENGTH:
        raise TextTooShortError(
            f"Text must be at least {MIN_TEXT_LENGTH} characters"
        )

    if len(sanitized) > MAX_TEXT_LENGTH:
        raise TextTooLongError(
            f"Text must be less than {MAX_TEXT_LENGTH} characters"
        )

    if len(_ASCII_LETTER.findall(sanitized)) < MIN_ALPHA_CHARS:
        raise InsufficientContentError()

    return sanitized

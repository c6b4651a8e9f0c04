"""Caller authentication against Supabase Auth."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from supabase import Client

from app.core.errors import AuthFailedError, AuthRequiredError
from app.db.supabase import close_user_client, get_user_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Resolved caller plus a client scoped to their credentials."""
    user_id: str
    client: Client


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return authorization.strip()


def resolve_user(authorization: str | None) -> AuthenticatedUser:
    """Resolve the ``Authorization`` header to a user.

    Raises ``AuthRequiredError`` when the header is missing and
    ``AuthFailedError`` when Supabase rejects the token.
    """
    if not authorization:
        raise AuthRequiredError()

    client = get_user_client(authorization)
    try:
        response = client.auth.get_user(_bearer_token(authorization))
    except Exception as exc:
        logger.warning("auth_lookup_failed", extra={"error_message": str(exc)})
        close_user_client(client)
        raise AuthFailedError() from exc

    user = response.user if response is not None else None
    if user is None:
        logger.warning("auth_no_user")
        close_user_client(client)
        raise AuthFailedError()

    return AuthenticatedUser(user_id=str(user.id), client=client)

"""Supabase client helpers.

``get_supabase()`` returns a lazily-initialized, process-wide client built
from the anon key; it reads public data such as the theme catalog.
``get_user_client()`` builds a client that forwards the caller's
``Authorization`` header so row-level security applies to their profile.
Per-caller clients are released with ``close_user_client()`` once the
request is done.
"""

import logging

from supabase import Client, ClientOptions, create_client

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    return _client


def get_user_client(authorization: str) -> Client:
    """Return a new client acting on behalf of the caller."""
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        options=ClientOptions(headers={"Authorization": authorization}),
    )


def close_user_client(client: Client) -> None:
    """Close the HTTP session a per-caller client opened for table access.

    Safe to call on a client that never issued a query.
    """
    try:
        client.postgrest.session.close()
    except Exception:
        logger.warning("user_client_close_failed", exc_info=True)

"""Theme catalog cache.

Themes are static reference data: they are read from the ``themes`` table
on first use and reused across requests.  The cache is an explicit object
owned by the application lifespan, with an optional TTL and a manual
``invalidate()`` hook for when themes change.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from supabase import Client

from app.core.constants import THEME_COLUMNS, THEMES_TABLE
from app.core.errors import CatalogUnavailableError
from app.models.theme import Theme

logger = logging.getLogger(__name__)

ThemeLoader = Callable[[], list[Theme]]


def load_themes_from_store(client: Client) -> list[Theme]:
    """Read every theme row ordered by ``name``."""
    result = (
        client.table(THEMES_TABLE)
        .select(THEME_COLUMNS)
        .order("name")
        .execute()
    )
    return [Theme.model_validate(row) for row in (result.data or [])]


class ThemeCatalog:
    """Lazily populated, lock-guarded cache of theme definitions.

    Parameters
    ----------
    loader:
        Zero-argument callable returning the themes in catalog order.
    ttl_seconds:
        Cache lifetime.  ``None`` or ``0`` keeps the themes until
        :meth:`invalidate` is called.
    clock:
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        loader: ThemeLoader,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl_seconds = ttl_seconds or None
        self._clock = clock
        self._lock = threading.Lock()
        self._themes: tuple[Theme, ...] | None = None
        self._loaded_at: float | None = None

    @property
    def is_loaded(self) -> bool:
        return self._themes is not None and not self._is_expired()

    def get(self) -> list[Theme]:
        """Return the cached themes, loading them on first use.

        Raises ``CatalogUnavailableError`` if the store fails or returns no
        themes; nothing is cached in that case.
        """
        themes = self._themes
        if themes is not None and not self._is_expired():
            return list(themes)

        with self._lock:
            # Another request may have loaded while we waited
            if self._themes is None or self._is_expired():
                self._themes = self._load()
                self._loaded_at = self._clock()
            return list(self._themes)

    def invalidate(self) -> None:
        """Drop the cached themes so the next ``get()`` reloads them."""
        with self._lock:
            self._themes = None
            self._loaded_at = None
        logger.info("theme_catalog_invalidated")

    def _is_expired(self) -> bool:
        if self._ttl_seconds is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at >= self._ttl_seconds

    def _load(self) -> tuple[Theme, ...]:
        logger.info("theme_catalog_loading")
        try:
            themes = self._loader()
        except Exception as exc:
            logger.error(
                "theme_catalog_load_failed",
                extra={"error_message": str(exc)},
            )
            raise CatalogUnavailableError() from exc

        if not themes:
            logger.error("theme_catalog_empty")
            raise CatalogUnavailableError()

        logger.info("theme_catalog_loaded", extra={"theme_count": len(themes)})
        return tuple(themes)

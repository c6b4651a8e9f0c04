"""FastAPI application entry point.

Configures CORS, structured logging, the theme catalog (built once per
process in the lifespan and shared by every request) and router
registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send

from app.core.config import settings
from app.core.constants import FUNCTIONS_PREFIX
from app.core.logging import setup_logging
from app.db.supabase import get_supabase
from app.routers import health, insights
from app.services.catalog import ThemeCatalog, load_themes_from_store

logger = logging.getLogger(__name__)


def build_theme_catalog() -> ThemeCatalog:
    """Create the process-wide catalog; themes load on the first request."""
    return ThemeCatalog(
        loader=lambda: load_themes_from_store(get_supabase()),
        ttl_seconds=settings.THEME_CACHE_TTL_SECONDS,
    )


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up")
    application.state.theme_catalog = build_theme_catalog()
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Memento Insights API",
    description="Theme analysis for new-user self-reflections",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]


class AppCORSMiddleware(CORSMiddleware):
    """CORS for the app, except the function routes.

    Function routes answer their own OPTIONS requests and attach
    ``CORS_HEADERS`` to every response, so a preflight always gets 200
    "ok" regardless of ``ALLOWED_ORIGINS``.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(FUNCTIONS_PREFIX):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


app.add_middleware(
    AppCORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(insights.router, prefix=FUNCTIONS_PREFIX, tags=["Insights"])

"""Health check endpoint.

Reports Supabase connectivity and whether the theme catalog is cached.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from app.core.constants import THEMES_TABLE
from app.db.supabase import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> Any:
    """Return health status including a real Supabase connectivity test.

    Returns 200 OK when healthy, 503 when the database is unreachable.
    """
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table(THEMES_TABLE).select("name").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    catalog = getattr(request.app.state, "theme_catalog", None)

    payload: dict[str, Any] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "themes_cached": bool(catalog and catalog.is_loaded),
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload

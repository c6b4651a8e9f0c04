"""New-user insights endpoint.

``/new-user-insights`` accepts every method; the caller is authenticated
before the method is checked:

- OPTIONS -> preflight "ok" with CORS headers
- missing / rejected credentials -> 401
- anything but POST -> 405
- POST ``{"selfReflectionText": "..."}`` -> ``AnalysisResponse``

Errors are returned as ``{"error": ..., "code": ...}``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse, PlainTextResponse, Response

from app.core.constants import CORS_HEADERS
from app.core.errors import (
    InsightsError,
    InternalError,
    InvalidJsonError,
    MethodNotAllowedError,
    MissingTextError,
)
from app.core.logging import mask_user_id
from app.db.supabase import close_user_client
from app.models.enums import AnalysisStage
from app.models.insights import AnalysisRequest, ErrorResponse
from app.services.auth import AuthenticatedUser, resolve_user
from app.services.catalog import ThemeCatalog
from app.services.insights import analyze_self_reflection

logger = logging.getLogger(__name__)

router = APIRouter()


def get_theme_catalog(request: Request) -> ThemeCatalog:
    """Dependency returning the catalog built in the application lifespan."""
    return request.app.state.theme_catalog


def _error_response(exc: InsightsError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, code=exc.code, retry_after=exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=CORS_HEADERS,
    )


async def _read_reflection_text(request: Request) -> str:
    try:
        body: Any = await request.json()
    except ValueError as exc:
        raise InvalidJsonError() from exc

    try:
        payload = AnalysisRequest.model_validate(body)
    except ValidationError as exc:
        raise MissingTextError() from exc
    return payload.self_reflection_text


@router.api_route(
    "/new-user-insights",
    methods=["OPTIONS", "POST", "GET", "HEAD", "PUT", "PATCH", "DELETE"],
)
async def new_user_insights(
    request: Request,
    catalog: ThemeCatalog = Depends(get_theme_catalog),
) -> Response:
    """Analyze a self-reflection and return personalized themes.

    Supabase calls are blocking, so authentication and the analysis run in
    the threadpool; only body parsing stays on the event loop.
    """
    if request.method == "OPTIONS":
        return PlainTextResponse("ok", headers=CORS_HEADERS)

    stage = AnalysisStage.unauthenticated
    logger.debug("analysis_stage", extra={"stage": stage.value})
    user: AuthenticatedUser | None = None

    try:
        user = await run_in_threadpool(resolve_user, request.headers.get("Authorization"))
        stage = AnalysisStage.validating
        logger.info(
            "theme_analysis_requested",
            extra={"user": mask_user_id(user.user_id)},
        )

        if request.method != "POST":
            raise MethodNotAllowedError()

        raw_text = await _read_reflection_text(request)
        result = await run_in_threadpool(analyze_self_reflection, user, raw_text, catalog)
    except InsightsError as exc:
        if stage is AnalysisStage.unauthenticated:
            logger.warning(
                "analysis_failed",
                extra={
                    "stage": stage.value,
                    "next_stage": AnalysisStage.failed.value,
                    "code": exc.code.value,
                },
            )
        return _error_response(exc)
    except Exception:
        logger.exception("theme_analysis_unexpected_error")
        return _error_response(InternalError())
    finally:
        if user is not None:
            close_user_client(user.client)

    logger.info(
        "theme_analysis_responded",
        extra={
            "theme_count": result.theme_count,
            "first_theme": result.themes[0].name if result.themes else None,
        },
    )
    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        headers=CORS_HEADERS,
    )

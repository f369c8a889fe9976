"""Health check endpoints. Liveness has no dependencies; readiness pings the database."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.infrastructure.persistence.database import get_session_factory
from app.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers (or is not configured); 503 otherwise."""
    cache = getattr(request.app.state, "cache", None)
    cache_name = type(cache).__name__ if cache is not None else "none"
    factory = get_session_factory()
    if factory is None:
        return ReadinessResponse(database="not_configured", cache=cache_name)
    try:
        async with factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Readiness check: database unavailable")
        body = ReadinessResponse(
            status="not_ready", database="unavailable", cache=cache_name
        )
        return JSONResponse(status_code=503, content=body.model_dump())
    return ReadinessResponse(database="ok", cache=cache_name)

"""Health check endpoints, used for liveness and readiness probes."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from codegen.core.config import get_settings
from codegen.infrastructure.persistence.database import get_session_factory
from codegen.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Counter store unreachable", "model": ReadinessResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 if the counter store answers (or is not configured); 503 otherwise.

    Without DATABASE_URL only non-sequential patterns work, which is still ready.
    """
    session_factory = get_session_factory()
    if session_factory is None:
        return ReadinessResponse(database="not_configured")
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(
                status="not_ready", database="unavailable"
            ).model_dump(),
        )
    return ReadinessResponse(database="ok")

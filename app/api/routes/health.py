"""Health endpoints for load balancers and orchestrators."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter

from app.core.config import settings
from app.core.logging import get_logger
from app.database.connection import ping_database
from app.schemas.common import HealthResponse


router = APIRouter(prefix="/health")

logger = get_logger("health")


async def db_healthcheck() -> bool:
    """True when the content store answers ``SELECT 1``."""
    try:
        return await ping_database()
    except Exception as e:
        logger.warning(f"Content store ping failed: {e}")
        return False


@router.get("", response_model=HealthResponse, summary="Readiness")
async def health_check() -> HealthResponse:
    """Report whether the content store is reachable."""
    checks = {"database": await db_healthcheck()}
    return HealthResponse(
        status="healthy" if all(checks.values()) else "unhealthy",
        version=settings.app_version,
        timestamp=datetime.now(UTC),
        checks=checks,
    )


@router.get("/live", summary="Liveness")
async def liveness_check() -> dict:
    return {"status": "alive"}

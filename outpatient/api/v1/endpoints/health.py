"""Health check endpoints."""

from datetime import date

from fastapi import APIRouter, status
from pydantic import BaseModel

from outpatient.config import settings
from outpatient.core.clock import clinic_today
from outpatient.core.redis_client import check_redis_connection
from outpatient.database import check_database_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Health of the service and the stores it depends on."""

    database: str
    cache: str
    clinic_timezone: str
    clinic_date: date


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Basic health status
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Detailed health check with database and cache status.

    The cache reports "disabled" when caching is turned off; a cache outage
    only degrades the service since every read falls back to the database.

    Returns:
        Detailed health status including dependencies
    """
    db_healthy = await check_database_connection()
    if settings.cache_enabled:
        cache_state = "healthy" if await check_redis_connection() else "unhealthy"
    else:
        cache_state = "disabled"

    if not db_healthy:
        overall = "unhealthy"
    elif cache_state == "unhealthy":
        overall = "degraded"
    else:
        overall = "healthy"

    return DetailedHealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
        cache=cache_state,
        clinic_timezone=settings.clinic_timezone,
        clinic_date=clinic_today(),
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    """Simple ping endpoint."""
    return {"message": "pong"}

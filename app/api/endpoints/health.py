"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Health plus the state of the database and Redis."""

    database: str
    redis: str


def _state(healthy: bool) -> str:
    return "healthy" if healthy else "unhealthy"


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Liveness probe; does not touch dependencies."""
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
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
    Readiness check with database and Redis status.

    Reports ``degraded`` instead of failing when a dependency is down.
    """
    db_healthy = await check_database_connection()
    redis_healthy = await check_redis_connection()

    return DetailedHealthResponse(
        status="healthy" if db_healthy and redis_healthy else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=_state(db_healthy),
        redis=_state(redis_healthy),
    )


@router.get("/ping", status_code=status.HTTP_200_OK, summary="Simple ping")
async def ping() -> dict[str, str]:
    return {"message": "pong"}

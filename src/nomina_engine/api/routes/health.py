"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from nomina_engine.api.dependencies import Service

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    storage: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(service: Service) -> HealthResponse:
    """Check API and storage health."""
    storage_status = "healthy"
    try:
        await service.list_months()
    except Exception:
        storage_status = "unhealthy"

    return HealthResponse(
        status="healthy" if storage_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        storage=storage_status,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}

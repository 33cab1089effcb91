"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...core.config import get_settings
from ...core.container import ServiceNames
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Ready once the lifespan has wired the booking services, and (for the
    mongo backend) the database answers a ping. Also reports how many
    schedule locks are currently held or awaited.
    """
    checks = {}
    all_ok = True
    active_locks = 0

    container = getattr(request.app.state, "container", None)
    if container is not None and container.has(ServiceNames.BOOKING_COORDINATOR):
        checks["services"] = "ok"
        active_locks = container.get(ServiceNames.LOCK_MANAGER).active_keys()
    else:
        checks["services"] = "not initialized"
        all_ok = False

    mongo_client = getattr(request.app.state, "mongo_client", None)
    if mongo_client is not None:
        try:
            await mongo_client.admin.command("ping")
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {str(e)[:50]}"
            all_ok = False
    else:
        checks["database"] = "memory"

    return ok(
        request,
        data={"ready": all_ok, "checks": checks, "active_locks": active_locks},
        message="Ready" if all_ok else "Not ready",
    )

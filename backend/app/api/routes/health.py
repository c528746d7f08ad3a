"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ answers 200 whenever the process is up; it never touches the store
    - GET /health/ready answers 503 until the lifespan has opened the store and
      a SELECT 1 round-trips

Design Decisions:
    - Separate liveness/readiness: liveness restarts the container, readiness
      only takes it out of the load balancer (ADR: production readiness)
    - Session manager read from app.state, set by the lifespan
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Ready once the store answers."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        reason = "database_not_initialized"
    elif not await manager.health_check():
        reason = "database_unavailable"
    else:
        return {"status": "ready", "checks": {"database": "healthy"}}

    logger.warning(f"Readiness probe failed: {reason}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )

"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the engine exists and the sweeper runs (readiness)
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from pairgate.services import coordination_engine, expiration_sweeper

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "pairgate-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — engine initialized and expiration sweeper running."""
    engine_ok = coordination_engine.engine is not None
    sweeper = expiration_sweeper.sweeper
    sweeper_ok = sweeper is not None and sweeper.running
    if not (engine_ok and sweeper_ok):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "engine_unavailable" if not engine_ok else "sweeper_stopped",
            },
        )
    return {
        "status": "ready",
        "checks": {"engine": "healthy", "sweeper": "running"},
    }

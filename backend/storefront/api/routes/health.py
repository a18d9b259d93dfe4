"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable or is
      missing any model table (migrations not applied)
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import storefront.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "storefront-api"
SERVICE_VERSION = "1.0.0"


def _not_ready(reason: str, **detail) -> JSONResponse:
    logger.warning(f"Readiness failed: {reason}", extra={"path": "/api/v1/health/ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason, **detail},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check():
    """Database round-trip plus a check that every table exists."""
    manager = database.db_manager
    started = time.perf_counter()
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")
    latency_ms = round((time.perf_counter() - started) * 1000, 1)

    missing = await manager.missing_tables()
    if missing:
        return _not_ready("schema_missing", missing_tables=missing)
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "current"},
        "database_latency_ms": latency_ms,
    }

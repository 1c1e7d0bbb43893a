"""
Health and readiness check endpoints for container probes.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lettings_admin.db.engine import check_engine_health

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness probe endpoint.

    Example:
        >>> GET /health
        {"status": "ok"}
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check() -> JSONResponse:
    """
    Readiness probe endpoint.

    Returns 200 when the marketplace database answers, 503 otherwise.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok"}}
    """
    if check_engine_health():
        return JSONResponse(content={"status": "ready", "checks": {"database": "ok"}})

    logger.error("readiness_check_failed", reason="database_not_accessible")
    return JSONResponse(
        status_code=503,
        content={"status": "not ready", "checks": {"database": "failed"}},
    )

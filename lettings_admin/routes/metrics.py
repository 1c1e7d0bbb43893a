"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP lettings_bookings_listed_total Total number of expanded booking rows ...
        # TYPE lettings_bookings_listed_total counter
        lettings_bookings_listed_total{source="booking_requests"} 42.0
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Metrics in Prometheus text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

"""
Read-only calls to the admin backend for properties, dashboard stats and booked properties.

Each call degrades to an empty or zeroed result when the backend is unreachable
or answers with a non-success status, so the dashboard always renders.
"""

from typing import Any, Optional

import requests
import structlog
from pydantic import ValidationError

from lettings_admin.network.client import request_json
from lettings_admin.schemas.properties import BookedProperty, DashboardStats, Property

logger = structlog.get_logger(__name__)

PROPERTIES_PATH = "api/properties"
STATS_PATH = "api/properties/stats"
BOOKED_PROPERTIES_PATH = "api/admin-booked-properties"


def fetch_body(path: str, access_token: Optional[str]) -> Optional[dict[str, Any]]:
    try:
        body, status_code = request_json("GET", path, access_token=access_token)
    except requests.RequestException as e:
        logger.error("backend_read_failed", path=path, error=str(e))
        return None

    if not 200 <= status_code < 300:
        logger.error("backend_read_rejected", path=path, status_code=status_code)
        return None
    return body


def parse_records(model: Any, items: list[Any], kind: str) -> list[Any]:
    parsed = []
    for item in items:
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            record_id = item.get("id") if isinstance(item, dict) else None
            logger.warning("skipping_invalid_record", kind=kind, id=record_id, error=str(e))
    return parsed


def get_all_properties(access_token: Optional[str] = None) -> list[Property]:
    """
    Fetch every property with its owner embedded.

    Args:
        access_token: Caller's bearer token

    Returns:
        list[Property]: Properties, or [] if the backend could not be read
    """
    body = fetch_body(PROPERTIES_PATH, access_token)
    if body is None:
        return []

    properties = parse_records(Property, body.get("data") or [], "property")
    logger.info("properties_fetched", count=len(properties))
    return properties


def get_dashboard_stats(access_token: Optional[str] = None) -> DashboardStats:
    """
    Fetch aggregate counts for the dashboard.

    Args:
        access_token: Caller's bearer token

    Returns:
        DashboardStats: Counts, all zero if the backend could not be read
    """
    body = fetch_body(STATS_PATH, access_token)
    if not body or not body.get("data"):
        return DashboardStats()

    try:
        return DashboardStats.model_validate(body["data"])
    except ValidationError as e:
        logger.error("dashboard_stats_invalid", error=str(e))
        return DashboardStats()


def get_booked_properties(access_token: Optional[str] = None) -> list[BookedProperty]:
    """
    Fetch confirmed property assignments.

    Args:
        access_token: Caller's bearer token

    Returns:
        list[BookedProperty]: Booked properties, or [] if the backend could not be read
    """
    body = fetch_body(BOOKED_PROPERTIES_PATH, access_token)
    if body is None:
        return []

    booked = parse_records(BookedProperty, body.get("bookedProperties") or [], "booked_property")
    logger.info("booked_properties_fetched", count=len(booked))
    return booked

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from lettings_admin.dependencies import get_access_token
from lettings_admin.schemas.properties import BookedProperty, DashboardStats, Property
from lettings_admin.services.catalog import (
    get_all_properties,
    get_booked_properties,
    get_dashboard_stats,
)
from lettings_admin.services.filters import (
    BOOKED_PROPERTY_FILTERS,
    PROPERTY_FILTERS,
    FilterSelection,
    apply_filters,
)

router = APIRouter()


@router.get("/properties", response_model=list[Property])
def get_properties(
    request: Request, access_token: Optional[str] = Depends(get_access_token)
) -> list[Property]:
    """
    List properties, filtered by any property filter named in the query string.

    Flag filters (e.g. ?high_speed_wifi=true) only apply when set to a true value.
    """
    selection = FilterSelection.from_params(request.query_params, PROPERTY_FILTERS)
    return apply_filters(get_all_properties(access_token), PROPERTY_FILTERS, selection)


@router.get("/stats", response_model=DashboardStats)
def get_stats(access_token: Optional[str] = Depends(get_access_token)) -> DashboardStats:
    return get_dashboard_stats(access_token)


@router.get("/booked-properties", response_model=list[BookedProperty])
def list_booked_properties(
    request: Request, access_token: Optional[str] = Depends(get_access_token)
) -> list[BookedProperty]:
    selection = FilterSelection.from_params(request.query_params, BOOKED_PROPERTY_FILTERS)
    return apply_filters(
        get_booked_properties(access_token), BOOKED_PROPERTY_FILTERS, selection
    )

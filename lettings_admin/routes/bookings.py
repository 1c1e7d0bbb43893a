from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from lettings_admin.dependencies import get_db_engine
from lettings_admin.errors import LookupNotFound
from lettings_admin.schemas.assignment import AssignmentPrefill
from lettings_admin.schemas.bookings import ExpandedBooking
from lettings_admin.services.assignment_form import lookup_booking_by_id
from lettings_admin.services.booking_directory import list_bookings
from lettings_admin.services.filters import BOOKING_FILTERS, FilterSelection, apply_filters

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/bookings", response_model=list[ExpandedBooking])
def get_bookings(request: Request, engine: Engine = Depends(get_db_engine)) -> list[ExpandedBooking]:
    """
    List every booking date as its own row.

    Query parameters named after a booking filter (search, contractor_code,
    property_id, city, status, start_date, end_date) switch that filter on.
    """
    selection = FilterSelection.from_params(request.query_params, BOOKING_FILTERS)
    bookings = list_bookings(engine)
    return apply_filters(bookings, BOOKING_FILTERS, selection)


@router.get("/booking-dates/{booking_date_id}/prefill", response_model=AssignmentPrefill)
def get_booking_prefill(
    booking_date_id: str, engine: Engine = Depends(get_db_engine)
) -> AssignmentPrefill:
    """
    Booking fields for a walk-up assignment form, looked up by booking date id.

    Raises:
        HTTPException: 404 with the lookup message, 503 if the database is unreachable
    """
    try:
        return lookup_booking_by_id(engine, booking_date_id)
    except LookupNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("booking_prefill_failed", booking_date_id=booking_date_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Error fetching booking data. Please try again.",
        )

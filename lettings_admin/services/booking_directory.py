"""
Booking directory: flattens raw booking records into one row per booking date.

Raw records come from whichever booking source answers (see
db/readers/bookings.py). A request with N dates becomes N rows that each carry
the request's contact details and exactly one date; a request with no dates
still becomes one row so that nothing disappears from the dashboard.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine

from lettings_admin.db.readers.bookings import fetch_raw_bookings
from lettings_admin.metrics import booking_directory_failures, bookings_listed
from lettings_admin.schemas.bookings import (
    UNKNOWN_CONTACT,
    UNKNOWN_NAME,
    BookingDate,
    BookingRef,
    ContractorSummary,
    ExpandedBooking,
    PropertyProjection,
)
from lettings_admin.utils.address import format_full_address

logger = structlog.get_logger(__name__)

DEFAULT_REQUEST_STATUS = "pending"


def _optional_id(value: Any) -> Optional[str]:
    """Driver ids may be uuid.UUID or int; rows carry them as strings."""
    return str(value) if value else None


def display_status(date_status: Optional[str], request_status: Optional[str]) -> str:
    """
    Status shown for one booking row.

    The date's own status wins when set, with "confirmed" shown as "active".
    Otherwise the parent request's status is used.

    Args:
        date_status: booking_dates.status, may be empty
        request_status: booking_requests.status

    Returns:
        str: Display status
    """
    if date_status:
        return "active" if date_status == "confirmed" else date_status
    return request_status or DEFAULT_REQUEST_STATUS


def resolve_property(
    record: dict[str, Any], raw_date: Optional[dict[str, Any]]
) -> Optional[PropertyProjection]:
    """
    Property assigned to a booking row.

    Priority: the booked property nested under the date, then the legacy
    assigned_property_id (property_id on flat bookings) as a placeholder carrying
    only the id, then None.
    """
    booked = raw_date.get("booked_property") if raw_date else None
    if booked:
        return PropertyProjection(
            id=str(booked["id"]),
            property_name=booked.get("property_name"),
            full_address=format_full_address(booked),
            weekly_rate=booked.get("weekly_rate") or 0,
            monthly_rate=booked.get("monthly_rate") or 0,
        )

    legacy_id = record.get("assigned_property_id") or record.get("property_id")
    if legacy_id:
        return PropertyProjection(id=str(legacy_id))

    return None


def resolve_contractor(record: dict[str, Any]) -> ContractorSummary:
    """
    Contractor shown for a booking row; never None.

    Priority: nested contractor profile, then the request's own contact fields,
    then sentinel values.
    """
    nested = record.get("contractor")
    if nested:
        return ContractorSummary(
            id=str(nested.get("id") or ""),
            full_name=nested.get("full_name") or record.get("full_name") or UNKNOWN_NAME,
            email=nested.get("email") or record.get("email") or UNKNOWN_CONTACT,
            code=_optional_id(nested.get("code")),
        )

    if record.get("full_name") or record.get("email"):
        return ContractorSummary(
            id=str(record.get("user_id") or record.get("contractor_id") or ""),
            full_name=record.get("full_name") or UNKNOWN_NAME,
            email=record.get("email") or UNKNOWN_CONTACT,
        )

    return ContractorSummary()


def expand_booking(record: dict[str, Any]) -> list[ExpandedBooking]:
    """
    Expand one raw booking record into display rows.

    Args:
        record: Raw record from either booking source

    Returns:
        list[ExpandedBooking]: One row per booking date, or exactly one row
        with no dates when the record has none
    """
    raw_dates = record.get("booking_dates") or []
    if not raw_dates:
        return [_build_row(record, None)]
    return [_build_row(record, raw_date) for raw_date in raw_dates]


def _build_row(record: dict[str, Any], raw_date: Optional[dict[str, Any]]) -> ExpandedBooking:
    request_id = str(record["id"])
    contractor = resolve_contractor(record)

    if raw_date is not None:
        booking_date = BookingDate.model_validate(
            {**raw_date, "id": str(raw_date["id"]), "booking_request_id": request_id}
        )
        ref = BookingRef(request_id=request_id, date_id=booking_date.id)
        dates = [booking_date]
        start_date, end_date = booking_date.start_date, booking_date.end_date
        date_status = booking_date.status
    else:
        ref = BookingRef(request_id=request_id)
        dates = []
        start_date, end_date = record.get("start_date"), record.get("end_date")
        date_status = None

    return ExpandedBooking(
        ref=ref,
        full_name=record.get("full_name") or contractor.full_name,
        company_name=record.get("company_name"),
        email=record.get("email") or contractor.email,
        phone=record.get("phone") or (record.get("contractor") or {}).get("phone") or UNKNOWN_CONTACT,
        project_postcode=record.get("project_postcode"),
        city=record.get("city"),
        team_size=record.get("team_size"),
        budget_per_person_week=record.get("budget_per_person_week"),
        status=display_status(date_status, record.get("status")),
        request_status=record.get("status"),
        assigned_property_id=_optional_id(
            record.get("assigned_property_id") or record.get("property_id")
        ),
        user_id=_optional_id(record.get("user_id") or record.get("contractor_id")),
        admin_notes=record.get("admin_notes"),
        created_at=record.get("created_at"),
        updated_at=record.get("updated_at"),
        booking_dates=dates,
        start_date=start_date,
        end_date=end_date,
        assigned_property=resolve_property(record, raw_date),
        contractor=contractor,
    )


def list_bookings(engine: Engine) -> list[ExpandedBooking]:
    """
    List every booking as expanded, display-ready rows.

    Never raises: a failed query or a record that cannot be mapped is logged and
    the whole result degrades to an empty list.

    Args:
        engine: SQLAlchemy engine for the marketplace database

    Returns:
        list[ExpandedBooking]: Rows for all bookings, newest request first
    """
    try:
        with engine.connect() as conn:
            raw = fetch_raw_bookings(conn)
        rows = [row for record in raw.records for row in expand_booking(record)]
    except Exception as e:
        logger.exception("list_bookings_failed", error=str(e))
        booking_directory_failures.inc()
        return []

    bookings_listed.labels(source=raw.source.value).inc(len(rows))
    logger.info(
        "bookings_listed",
        source=raw.source.value,
        records=len(raw.records),
        rows=len(rows),
    )
    return rows

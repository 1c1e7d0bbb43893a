"""
Identifier resolution and form building for property assignments.

Booking data reaches this module in several shapes: expanded booking rows from
the booking directory, bare display ids from older clients, or nothing at all
for walk-up bookings. Every lookup here is independent and failure-tolerant so
one missing row never prevents the form from being built.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from lettings_admin.db.readers.bookings import (
    get_booking_date,
    get_booking_request,
    get_single_booking_date_id,
)
from lettings_admin.db.readers.profiles import get_contractor, get_landlord
from lettings_admin.errors import BookingDateNotFound, BookingRequestDataMissing
from lettings_admin.metrics import booking_lookups
from lettings_admin.schemas.assignment import UNKNOWN, AssignmentForm, AssignmentPrefill
from lettings_admin.schemas.bookings import AssignmentCandidate
from lettings_admin.schemas.properties import Property
from lettings_admin.utils.address import format_full_address
from lettings_admin.utils.datetime import iso_date

logger = structlog.get_logger(__name__)

DISPLAY_ID_SEPARATOR = "-"

Reader = Callable[[Connection, str], Optional[dict[str, Any]]]


def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def candidate_request_id(candidate: AssignmentCandidate) -> Optional[str]:
    """Parent booking request id of a candidate, falling back to the display id prefix."""
    if candidate.booking_request_id:
        return candidate.booking_request_id
    if candidate.ref is not None:
        return candidate.ref.request_id
    if candidate.id:
        return candidate.id.split(DISPLAY_ID_SEPARATOR)[0]
    return None


def resolve_booking_date_id(engine: Engine, candidate: AssignmentCandidate) -> str:
    """
    Work out which booking_dates row an assignment targets.

    Tried in order, stopping at the first hit:

    1. the first booking date nested on the candidate
    2. the date store, by parent request id (only when the request has exactly one date)
    3. the date id carried by the candidate's BookingRef, else the second segment
       of a "<request>-<date>" display id

    Args:
        engine: SQLAlchemy engine for the marketplace database
        candidate: Booking-like object to resolve

    Returns:
        str: The booking date id, or "" if it could not be resolved
    """
    if candidate.booking_dates and candidate.booking_dates[0].id:
        return candidate.booking_dates[0].id

    request_id = candidate.booking_request_id or (candidate.ref.request_id if candidate.ref else None)
    if request_id:
        try:
            with engine.connect() as conn:
                date_id = get_single_booking_date_id(conn, request_id)
            if date_id:
                return date_id
        except SQLAlchemyError as e:
            logger.warning("booking_date_lookup_failed", booking_request_id=request_id, error=str(e))

    if candidate.ref is not None and candidate.ref.date_id:
        return candidate.ref.date_id

    if DISPLAY_ID_SEPARATOR in candidate.id:
        return candidate.id.split(DISPLAY_ID_SEPARATOR)[1]

    logger.info("booking_date_unresolved", candidate_id=candidate.id)
    return ""


def _safe_lookup(kind: str, reader: Reader, engine: Engine, key: Optional[str]) -> Optional[dict[str, Any]]:
    if not key:
        return None
    try:
        with engine.connect() as conn:
            row = reader(conn, key)
    except SQLAlchemyError as e:
        logger.warning("assignment_lookup_failed", kind=kind, key=key, error=str(e))
        return None

    if row is None:
        logger.info("assignment_lookup_not_found", kind=kind, key=key)
    return row


def _property_fields(prop: Property, landlord: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    landlord = landlord or {}
    owner = prop.owner
    return {
        "property_id": prop.id,
        "property_name": prop.display_name,
        "property_type": prop.property_type or "",
        "property_address": format_full_address(prop) or prop.address or "",
        "landlord_name": _first(landlord.get("full_name"), owner and owner.full_name) or UNKNOWN,
        "landlord_contact": _first(
            landlord.get("contact_number"),
            landlord.get("email"),
            owner and owner.contact_number,
            owner and owner.email,
        )
        or UNKNOWN,
    }


def new_booking_form(prop: Property) -> AssignmentForm:
    """
    Blank form for a walk-up booking on a property.

    Only the property fields and the postcode (taken from the property) are
    filled; booking details arrive later through a booking id lookup.
    """
    return AssignmentForm(postcode=prop.postcode or "", **_property_fields(prop))


def _local_form(candidate: AssignmentCandidate, prop: Property, booking_date_id: str) -> AssignmentForm:
    first_date = candidate.booking_dates[0] if candidate.booking_dates else None
    return AssignmentForm(
        booking_date_id=booking_date_id,
        start_date=iso_date(_first(first_date and first_date.start_date, candidate.start_date)),
        end_date=iso_date(_first(first_date and first_date.end_date, candidate.end_date)),
        postcode=candidate.project_postcode or "",
        contractor_name=candidate.full_name or "",
        contractor_email=candidate.email or "",
        contractor_phone=candidate.phone or "",
        team_size=candidate.team_size or 0,
        **_property_fields(prop),
    )


def build_assignment_form(
    engine: Engine,
    booking: AssignmentCandidate,
    prop: Property,
    is_new_booking: bool = False,
) -> AssignmentForm:
    """
    Build the editable assignment form for a booking and a property.

    For a new (walk-up) booking no lookups are made. For an existing booking the
    booking request, its contractor and the property's landlord are each looked
    up independently; whatever is found is merged over the candidate's own data.
    If anything unexpected fails, the same form is built from the candidate and
    property alone.

    Args:
        engine: SQLAlchemy engine for the marketplace database
        booking: Booking being assigned (empty for walk-ups)
        prop: Property being assigned
        is_new_booking: True for a walk-up booking started from a property

    Returns:
        AssignmentForm: A fully populated form
    """
    if is_new_booking:
        logger.info("assignment_form_new_booking", property_id=prop.id)
        return new_booking_form(prop)

    booking_date_id = ""
    try:
        booking_date_id = resolve_booking_date_id(engine, booking)

        request = _safe_lookup(
            "booking_request", get_booking_request, engine, candidate_request_id(booking)
        ) or {}
        contractor = _safe_lookup("contractor", get_contractor, engine, request.get("user_id")) or {}
        landlord = _safe_lookup("landlord", get_landlord, engine, prop.landlord_id)

        first_date = booking.booking_dates[0] if booking.booking_dates else None
        form = AssignmentForm(
            booking_date_id=booking_date_id,
            start_date=iso_date(
                _first(first_date and first_date.start_date, request.get("start_date"), booking.start_date)
            ),
            end_date=iso_date(
                _first(first_date and first_date.end_date, request.get("end_date"), booking.end_date)
            ),
            postcode=_first(request.get("project_postcode"), booking.project_postcode) or "",
            contractor_name=_first(
                contractor.get("full_name"), request.get("full_name"), booking.full_name
            )
            or "",
            contractor_email=_first(contractor.get("email"), request.get("email"), booking.email)
            or "",
            contractor_phone=_first(request.get("phone"), contractor.get("phone"), booking.phone)
            or "",
            team_size=_first(request.get("team_size"), booking.team_size) or 0,
            **_property_fields(prop, landlord),
        )
    except Exception as e:
        logger.exception("assignment_form_fallback", candidate_id=booking.id, error=str(e))
        return _local_form(booking, prop, booking_date_id)

    logger.info(
        "assignment_form_built",
        booking_date_id=booking_date_id,
        property_id=prop.id,
        request_found=bool(request),
        landlord_found=landlord is not None,
    )
    return form


def lookup_booking_by_id(engine: Engine, booking_date_id: str) -> AssignmentPrefill:
    """
    Recover booking details from a booking date id typed in by staff.

    Args:
        engine: SQLAlchemy engine for the marketplace database
        booking_date_id: booking_dates.id

    Returns:
        AssignmentPrefill: Dates, postcode, contractor details and team size

    Raises:
        BookingDateNotFound: If no booking date has this id
        BookingRequestDataMissing: If the date exists but its request does not
        SQLAlchemyError: If the database could not be read
    """
    booking_date_id = booking_date_id.strip()

    try:
        with engine.connect() as conn:
            booking_date = get_booking_date(conn, booking_date_id)
            if booking_date is None:
                booking_lookups.labels(outcome="date_not_found").inc()
                raise BookingDateNotFound(booking_date_id)

            request = get_booking_request(conn, booking_date["booking_request_id"])
            if request is None:
                booking_lookups.labels(outcome="request_missing").inc()
                raise BookingRequestDataMissing(booking_date_id)
    except SQLAlchemyError:
        booking_lookups.labels(outcome="error").inc()
        raise

    booking_lookups.labels(outcome="found").inc()
    logger.info("booking_lookup_found", booking_date_id=booking_date_id)

    return AssignmentPrefill(
        booking_date_id=booking_date_id,
        start_date=iso_date(booking_date.get("start_date")),
        end_date=iso_date(booking_date.get("end_date")),
        postcode=request.get("project_postcode"),
        contractor_name=request.get("full_name") or "",
        contractor_email=request.get("email") or "",
        contractor_phone=request.get("phone") or "",
        team_size=request.get("team_size") or 0,
    )


def apply_prefill(form: AssignmentForm, prefill: AssignmentPrefill) -> AssignmentForm:
    """Overwrite the booking fields of a form, keeping its property and landlord fields."""
    return form.model_copy(
        update={
            "booking_date_id": prefill.booking_date_id,
            "start_date": prefill.start_date,
            "end_date": prefill.end_date,
            "postcode": prefill.postcode or form.postcode,
            "contractor_name": prefill.contractor_name,
            "contractor_email": prefill.contractor_email,
            "contractor_phone": prefill.contractor_phone,
            "team_size": prefill.team_size,
        }
    )


def clear_prefill(form: AssignmentForm) -> AssignmentForm:
    """Empty every field a booking id lookup fills in."""
    return form.model_copy(
        update={
            "booking_date_id": "",
            "start_date": "",
            "end_date": "",
            "postcode": "",
            "contractor_name": "",
            "contractor_email": "",
            "contractor_phone": "",
            "team_size": 0,
        }
    )

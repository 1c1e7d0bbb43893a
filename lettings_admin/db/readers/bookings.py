"""
Booking source port with one adapter per upstream booking schema.

Two schemas exist in the wild:

- ``booking_requests`` with child ``booking_dates`` rows (current)
- a flat ``bookings`` table with one row per stay (legacy)

Each adapter probes whether its tables exist before querying. fetch_raw_bookings()
walks the adapters in preference order and returns the first successful result
tagged with the source it came from.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple, Optional, Sequence

import structlog
from sqlalchemy import inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from lettings_admin.metrics import booking_source_fallbacks, db_query_duration
from lettings_admin.models.bookings import BookedProperty, BookingDate, BookingRequest, LegacyBooking
from lettings_admin.models.profiles import Contractor
from lettings_admin.models.properties import Property

logger = structlog.get_logger(__name__)

booking_requests = BookingRequest.__table__
booking_dates = BookingDate.__table__
booked_properties = BookedProperty.__table__
legacy_bookings = LegacyBooking.__table__
properties = Property.__table__
contractors = Contractor.__table__


class BookingSource(str, Enum):
    BOOKING_REQUESTS = "booking_requests"
    LEGACY_BOOKINGS = "bookings"


class RawBookings(NamedTuple):
    """Raw booking records together with the schema they were read from."""

    source: BookingSource
    records: list[dict[str, Any]]


class NoBookingSourceAvailable(RuntimeError):
    pass


def _has_tables(conn: Connection, *names: str) -> bool:
    inspector = inspect(conn)
    return all(inspector.has_table(name) for name in names)


def _contractors_by_id(conn: Connection, ids: set[str]) -> dict[str, dict[str, Any]]:
    if not ids or not _has_tables(conn, "contractor"):
        return {}
    with db_query_duration.labels(table="contractor").time():
        rows = conn.execute(select(contractors).where(contractors.c.id.in_(ids))).mappings().all()
    return {row["id"]: dict(row) for row in rows}


class RequestsWithDatesSource:
    """Adapter for booking_requests + booking_dates, with nested property and contractor."""

    source = BookingSource.BOOKING_REQUESTS

    def is_available(self, conn: Connection) -> bool:
        return _has_tables(conn, "booking_requests", "booking_dates")

    def fetch(self, conn: Connection) -> list[dict[str, Any]]:
        """
        Read every booking request with its dates nested under "booking_dates".

        Each date carries a "booked_property" key holding the assigned property row
        (or None), and each request carries a "contractor" key resolved from user_id.

        Args:
            conn: Active SQLAlchemy connection

        Returns:
            list[dict]: Booking requests, newest first
        """
        with db_query_duration.labels(table="booking_requests").time():
            request_rows = conn.execute(
                select(booking_requests).order_by(booking_requests.c.created_at.desc())
            ).mappings().all()

        records = [dict(row) for row in request_rows]
        if not records:
            return []

        request_ids = [r["id"] for r in records]
        with db_query_duration.labels(table="booking_dates").time():
            date_rows = conn.execute(
                select(booking_dates)
                .where(booking_dates.c.booking_request_id.in_(request_ids))
                .order_by(booking_dates.c.start_date)
            ).mappings().all()

        dates = [dict(row) for row in date_rows]
        booked_by_date = self._booked_properties_by_date(conn, [d["id"] for d in dates])

        dates_by_request: dict[str, list[dict[str, Any]]] = {rid: [] for rid in request_ids}
        for d in dates:
            d["booked_property"] = booked_by_date.get(d["id"])
            dates_by_request[d["booking_request_id"]].append(d)

        contractor_rows = _contractors_by_id(conn, {r["user_id"] for r in records if r.get("user_id")})

        for r in records:
            r["booking_dates"] = dates_by_request[r["id"]]
            r["contractor"] = contractor_rows.get(r.get("user_id") or "")

        return records

    def _booked_properties_by_date(
        self, conn: Connection, date_ids: list[str]
    ) -> dict[str, dict[str, Any]]:
        if not date_ids or not _has_tables(conn, "booked_properties", "properties"):
            return {}

        with db_query_duration.labels(table="booked_properties").time():
            rows = conn.execute(
                select(booked_properties.c.booking_id, properties)
                .select_from(
                    booked_properties.join(
                        properties, properties.c.id == booked_properties.c.property_id
                    )
                )
                .where(booked_properties.c.booking_id.in_(date_ids))
            ).mappings().all()

        result: dict[str, dict[str, Any]] = {}
        for row in rows:
            prop = dict(row)
            booking_id = prop.pop("booking_id")
            result[booking_id] = prop
        return result


class LegacyBookingsSource:
    """Adapter for the flat bookings table."""

    source = BookingSource.LEGACY_BOOKINGS

    def is_available(self, conn: Connection) -> bool:
        return _has_tables(conn, "bookings")

    def fetch(self, conn: Connection) -> list[dict[str, Any]]:
        with db_query_duration.labels(table="bookings").time():
            rows = conn.execute(
                select(legacy_bookings).order_by(legacy_bookings.c.created_at.desc())
            ).mappings().all()

        records = [dict(row) for row in rows]
        contractor_rows = _contractors_by_id(
            conn, {r["contractor_id"] for r in records if r.get("contractor_id")}
        )
        for r in records:
            r["contractor"] = contractor_rows.get(r.get("contractor_id") or "")
        return records


DEFAULT_SOURCES: tuple[RequestsWithDatesSource | LegacyBookingsSource, ...] = (
    RequestsWithDatesSource(),
    LegacyBookingsSource(),
)


def fetch_raw_bookings(
    conn: Connection,
    sources: Optional[Sequence[RequestsWithDatesSource | LegacyBookingsSource]] = None,
) -> RawBookings:
    """
    Read raw booking records from the first source that is present and answers.

    A source is skipped when its probe reports missing tables or when its query
    raises; the connection is rolled back before the next source is tried.

    Args:
        conn: Active SQLAlchemy connection
        sources: Adapters in preference order (defaults to current, then legacy)

    Returns:
        RawBookings: The records and the source that produced them

    Raises:
        NoBookingSourceAvailable: If every source was skipped
    """
    for adapter in sources or DEFAULT_SOURCES:
        try:
            if not adapter.is_available(conn):
                logger.info("booking_source_unavailable", source=adapter.source.value)
                booking_source_fallbacks.labels(
                    source=adapter.source.value, reason="unavailable"
                ).inc()
                continue
            return RawBookings(adapter.source, adapter.fetch(conn))
        except SQLAlchemyError as e:
            logger.warning("booking_source_failed", source=adapter.source.value, error=str(e))
            booking_source_fallbacks.labels(source=adapter.source.value, reason="error").inc()
            conn.rollback()

    raise NoBookingSourceAvailable("No booking source could be read")


def get_booking_date(conn: Connection, booking_date_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a single booking_dates row by id.

    Args:
        conn (Connection): Active SQLAlchemy connection
        booking_date_id (str): booking_dates.id

    Returns:
        Optional[dict]: The row, or None if it does not exist
    """
    row = conn.execute(
        select(booking_dates).where(booking_dates.c.id == booking_date_id)
    ).mappings().fetchone()
    return dict(row) if row else None


def get_single_booking_date_id(conn: Connection, booking_request_id: str) -> Optional[str]:
    """
    Get the id of the only booking date belonging to a request.

    Requests with several dates are ambiguous and return None so the caller
    moves on to its next source of truth.

    Args:
        conn (Connection): Active SQLAlchemy connection
        booking_request_id (str): booking_requests.id

    Returns:
        Optional[str]: The date id, or None if there is not exactly one
    """
    rows = conn.execute(
        select(booking_dates.c.id)
        .where(booking_dates.c.booking_request_id == booking_request_id)
        .limit(2)
    ).fetchall()
    return rows[0][0] if len(rows) == 1 else None


def get_booking_request(conn: Connection, booking_request_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a booking request by id.

    Args:
        conn (Connection): Active SQLAlchemy connection
        booking_request_id (str): booking_requests.id

    Returns:
        Optional[dict]: The row, or None if it does not exist
    """
    row = conn.execute(
        select(booking_requests).where(booking_requests.c.id == booking_request_id)
    ).mappings().fetchone()
    return dict(row) if row else None

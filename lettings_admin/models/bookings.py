# models/bookings.py

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from lettings_admin.models.base import Base


class BookingRequest(Base):
    """
    ORM model for contractor-submitted booking requests (current schema).

    A request carries the contractor's contact details and project location and
    owns one or more booking_dates rows, one per contiguous stay window. The
    request-level status is advisory; each date carries its own status.
    """

    __tablename__ = "booking_requests"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=True, index=True)  # contractor.id
    full_name = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    project_postcode = Column(String, nullable=True)
    city = Column(String, nullable=True)
    team_size = Column(Integer, nullable=True)
    budget_per_person_week = Column(String, nullable=True)
    status = Column(String, nullable=False, server_default="pending")
    assigned_property_id = Column(String(36), nullable=True)  # Legacy single assignment
    admin_notes = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)  # Pre-booking_dates requests
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BookingDate(Base):
    """ORM model for a single stay window belonging to a booking request."""

    __tablename__ = "booking_dates"

    id = Column(String(36), primary_key=True)
    booking_request_id = Column(
        String(36), ForeignKey("booking_requests.id"), nullable=False, index=True
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BookedProperty(Base):
    """
    ORM model for a confirmed property assignment.

    Rows are written by the assignment service; booking_id references the
    booking_dates row the property was assigned to.
    """

    __tablename__ = "booked_properties"

    id = Column(String(36), primary_key=True)
    property_id = Column(String(36), nullable=False, index=True)  # properties.id
    contractor_id = Column(String(36), nullable=True)
    booking_request_id = Column(String(36), nullable=True, index=True)
    booking_id = Column(String(36), nullable=True, index=True)  # booking_dates.id
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    team_size = Column(Integer, nullable=True)
    project_postcode = Column(String, nullable=True)
    city = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class LegacyBooking(Base):
    """
    ORM model for the original flat bookings table.

    Older deployments store one row per stay with the property reference on the
    row itself and no separate dates table.
    """

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True)
    property_id = Column(String(36), nullable=True)
    contractor_id = Column(String(36), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, server_default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

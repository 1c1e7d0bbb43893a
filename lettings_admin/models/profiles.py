"""SQLAlchemy models for landlord (partner) and contractor (client) profiles."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func

from lettings_admin.models.base import Base


class Landlord(Base):
    """ORM model for a property owner."""

    __tablename__ = "landlord"

    id = Column(String(36), primary_key=True)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Contractor(Base):
    """
    ORM model for a contractor who requests accommodation.

    code is the short client reference staff search bookings by.
    """

    __tablename__ = "contractor"

    id = Column(String(36), primary_key=True)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    code = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

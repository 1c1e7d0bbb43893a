from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from lettings_admin.models.base import Base


class Property(Base):
    """
    ORM model for a bookable unit listed by a landlord.

    Carries a structured address plus the legacy flattened full_address, capacity
    metrics, amenity and compliance flags, and pricing.
    """

    __tablename__ = "properties"

    id = Column(String(36), primary_key=True)
    landlord_id = Column(String(36), nullable=True, index=True)
    property_name = Column(String, nullable=True)
    full_address = Column(String, nullable=True)
    house_address = Column(String, nullable=True)
    locality = Column(String, nullable=True)
    city = Column(String, nullable=True)
    county = Column(String, nullable=True)
    postcode = Column(String, nullable=True)
    country = Column(String, nullable=True)
    property_type = Column(String, nullable=True)
    bedrooms = Column(Integer, nullable=False, server_default="0")
    beds = Column(Integer, nullable=False, server_default="0")
    bathrooms = Column(Integer, nullable=False, server_default="0")
    max_occupancy = Column(Integer, nullable=False, server_default="0")
    parking_type = Column(String, nullable=True)
    weekly_rate = Column(Float, nullable=False, server_default="0")
    monthly_rate = Column(Float, nullable=False, server_default="0")
    bills_included = Column(Boolean, nullable=False, server_default="0")
    is_available = Column(Boolean, nullable=False, server_default="1")
    photos = Column(JSON, nullable=True)
    additional_info = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

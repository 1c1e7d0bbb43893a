from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

AMENITY_FLAGS: tuple[str, ...] = (
    "workspace_desk",
    "high_speed_wifi",
    "smart_tv",
    "fully_equipped_kitchen",
    "living_dining_space",
    "washing_machine",
    "iron_ironing_board",
    "linen_towels_provided",
    "consumables_provided",
)

SAFETY_FLAGS: tuple[str, ...] = (
    "smoke_alarm",
    "co_alarm",
    "fire_extinguisher_blanket",
    "epc",
    "gas_safety_certificate",
    "eicr",
)


class LandlordProfile(BaseModel):
    """Property owner as embedded in property listings."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    company_name: Optional[str] = None
    contact_number: Optional[str] = None
    phone: Optional[str] = None


class Property(BaseModel):
    """
    Schema for a bookable property as served by the admin properties API.

    title and address are the field names used by the oldest listings and are
    only read as fallbacks for property_name and full_address.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    landlord_id: Optional[str] = None
    property_name: Optional[str] = None
    title: Optional[str] = None

    full_address: Optional[str] = None
    address: Optional[str] = None
    house_address: Optional[str] = None
    locality: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None

    property_type: Optional[str] = None
    bedrooms: int = 0
    beds: int = 0
    beds_breakdown: Optional[str] = None
    bathrooms: int = 0
    max_occupancy: int = 0
    parking_type: Optional[str] = None
    relevant_contact: Optional[str] = None
    photos: list[str] = Field(default_factory=list)

    workspace_desk: bool = False
    high_speed_wifi: bool = False
    smart_tv: bool = False
    fully_equipped_kitchen: bool = False
    living_dining_space: bool = False
    washing_machine: bool = False
    iron_ironing_board: bool = False
    linen_towels_provided: bool = False
    consumables_provided: bool = False

    smoke_alarm: bool = False
    co_alarm: bool = False
    fire_extinguisher_blanket: bool = False
    epc: bool = False
    gas_safety_certificate: bool = False
    eicr: bool = False

    additional_info: Optional[str] = None
    weekly_rate: float = 0
    monthly_rate: float = 0
    bills_included: bool = False
    is_available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[LandlordProfile] = None

    @field_validator(
        "bedrooms",
        "beds",
        "bathrooms",
        "max_occupancy",
        "photos",
        "weekly_rate",
        "monthly_rate",
        "bills_included",
        "is_available",
        *AMENITY_FLAGS,
        *SAFETY_FLAGS,
        mode="before",
    )
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Older listings leave these columns null
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    @property
    def display_name(self) -> str:
        return self.property_name or self.title or ""


class DashboardStats(BaseModel):
    """Aggregate counts shown on the dashboard landing view."""

    model_config = ConfigDict(populate_by_name=True)

    total_properties: int = Field(0, alias="totalProperties")
    booked_properties: int = Field(0, alias="bookedProperties")
    active_bookings: int = Field(0, alias="activeBookings")
    pending_bookings: int = Field(0, alias="pendingBookings")
    complete_bookings: int = Field(0, alias="completeBookings")


class BookedProperty(BaseModel):
    """A confirmed assignment row as served by the booked-properties API."""

    model_config = ConfigDict(extra="ignore")

    id: str
    property_id: str
    contractor_id: Optional[str] = None
    booking_request_id: Optional[str] = None
    booking_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    team_size: Optional[int] = None
    project_postcode: Optional[str] = None
    city: Optional[str] = None
    company_name: Optional[str] = None
    property_name: Optional[str] = None
    property_type: Optional[str] = None
    created_at: Optional[datetime] = None
    properties: Optional[dict[str, Any]] = None
    contractor: Optional[dict[str, Any]] = None
    booking_requests: Optional[dict[str, Any]] = None

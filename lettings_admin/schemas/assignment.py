from typing import Optional

from pydantic import BaseModel, Field

from lettings_admin.schemas.bookings import AssignmentCandidate
from lettings_admin.schemas.properties import Property

UNKNOWN = "Unknown"


class AssignmentForm(BaseModel):
    """
    Editable form for binding one booking date to one property.

    Every field always holds a value: unresolved text fields are "", an unknown
    team size is 0 and unresolved landlord details are "Unknown".
    """

    booking_date_id: str = ""
    property_id: str = ""
    start_date: str = ""
    end_date: str = ""
    postcode: str = ""
    contractor_name: str = ""
    contractor_email: str = ""
    contractor_phone: str = ""
    team_size: int = 0
    property_name: str = ""
    property_type: str = ""
    property_address: str = ""
    landlord_name: str = UNKNOWN
    landlord_contact: str = UNKNOWN


class AssignmentPrefill(BaseModel):
    """Booking fields recovered from a booking date id typed in by staff."""

    booking_date_id: str
    start_date: str = ""
    end_date: str = ""
    postcode: Optional[str] = None
    contractor_name: str = ""
    contractor_email: str = ""
    contractor_phone: str = ""
    team_size: int = 0


class AssignmentConfirmation(BaseModel):
    message: str
    booking_date_id: str
    property_id: str


class AssignmentFormRequest(BaseModel):
    """Request body for building an assignment form."""

    booking: AssignmentCandidate = Field(default_factory=AssignmentCandidate)
    property: Property
    is_new_booking: bool = False

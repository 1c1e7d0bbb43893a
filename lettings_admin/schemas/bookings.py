from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

UNKNOWN_NAME = "Unknown"
UNKNOWN_CONTACT = "N/A"


class BookingDate(BaseModel):
    """One contiguous stay window within a booking request."""

    model_config = ConfigDict(extra="ignore")

    id: str
    booking_request_id: str
    start_date: date
    end_date: date
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_range(self) -> BookingDate:
        if self.end_date < self.start_date:
            raise ValueError(
                f"booking date {self.id} ends ({self.end_date}) before it starts ({self.start_date})"
            )
        return self


class BookingRef(BaseModel):
    """
    Identity of one expanded booking row.

    date_id is None for requests that have no booking dates. The "<request>-<date>"
    string is only ever produced for display.
    """

    model_config = ConfigDict(frozen=True)

    request_id: str
    date_id: Optional[str] = None

    def display(self) -> str:
        return f"{self.request_id}-{self.date_id}" if self.date_id else self.request_id


class PropertyProjection(BaseModel):
    """Property summary attached to a booking row."""

    id: str
    property_name: Optional[str] = None
    full_address: str = ""
    weekly_rate: float = 0
    monthly_rate: float = 0


class ContractorSummary(BaseModel):
    id: str = ""
    full_name: str = UNKNOWN_NAME
    email: str = UNKNOWN_CONTACT
    code: Optional[str] = None


class ExpandedBooking(BaseModel):
    """
    One row per booking date: the date, its parent request's contact details,
    and the property assigned to it (if any).

    booking_dates holds exactly one entry, or none when the parent request has no
    dates; in that case start_date/end_date come from the request itself.
    """

    ref: BookingRef
    full_name: str = UNKNOWN_NAME
    company_name: Optional[str] = None
    email: str = UNKNOWN_CONTACT
    phone: str = UNKNOWN_CONTACT
    project_postcode: Optional[str] = None
    city: Optional[str] = None
    team_size: Optional[int] = None
    budget_per_person_week: Optional[str] = None
    status: str
    request_status: Optional[str] = None
    assigned_property_id: Optional[str] = None
    user_id: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    booking_dates: list[BookingDate] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assigned_property: Optional[PropertyProjection] = None
    contractor: ContractorSummary = Field(default_factory=ContractorSummary)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.ref.display()

    @property
    def booking_request_id(self) -> str:
        return self.ref.request_id

    @computed_field  # type: ignore[prop-decorator]
    @property
    def nights(self) -> Optional[int]:
        if self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_assignable(self) -> bool:
        """A row can be assigned until its date has been confirmed."""
        if not self.booking_dates:
            return True
        return self.booking_dates[0].status != "confirmed"

    def to_candidate(self) -> AssignmentCandidate:
        return AssignmentCandidate(
            id=self.id,
            ref=self.ref,
            booking_request_id=self.ref.request_id,
            booking_dates=[
                CandidateDate(
                    id=d.id, start_date=d.start_date, end_date=d.end_date, status=d.status
                )
                for d in self.booking_dates
            ],
            start_date=self.start_date,
            end_date=self.end_date,
            project_postcode=self.project_postcode,
            full_name=_known(self.full_name),
            email=_known(self.email),
            phone=_known(self.phone),
            team_size=self.team_size,
        )


def _known(value: Optional[str]) -> Optional[str]:
    """Drop the display sentinels so they are not mistaken for real contact details."""
    if value in (UNKNOWN_NAME, UNKNOWN_CONTACT):
        return None
    return value


class CandidateDate(BaseModel):
    id: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None


class AssignmentCandidate(BaseModel):
    """
    A booking-like object handed to the assignment resolver.

    Any field may be missing: candidates come from expanded booking rows, from
    older dashboard clients that only know the display id, or are empty for
    walk-up bookings.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    ref: Optional[BookingRef] = None
    booking_request_id: Optional[str] = None
    booking_dates: list[CandidateDate] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    project_postcode: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    team_size: Optional[int] = None

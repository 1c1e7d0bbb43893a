"""
Exception hierarchy for the assignment workflow and user management.

Read paths (booking directory, catalog reads, profile lookups) log and degrade
to empty or fallback values instead of raising. Only the operations that the
caller must react to raise one of these.
"""

from __future__ import annotations

from enum import Enum


class LookupNotFound(Exception):
    """A referenced booking date or booking request does not exist."""


class BookingDateNotFound(LookupNotFound):
    def __init__(self, booking_date_id: str) -> None:
        super().__init__("Booking ID not found. Please check and try again.")
        self.booking_date_id = booking_date_id


class BookingRequestDataMissing(LookupNotFound):
    def __init__(self, booking_date_id: str) -> None:
        super().__init__("Booking request data not found for this ID.")
        self.booking_date_id = booking_date_id


class AssignmentErrorCode(str, Enum):
    MISSING_BOOKING_DATE_ID = "MISSING_BOOKING_DATE_ID"
    MISSING_PROPERTY = "MISSING_PROPERTY"
    MISSING_START_DATE = "MISSING_START_DATE"
    MISSING_END_DATE = "MISSING_END_DATE"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    ALREADY_ACTIVE = "BOOKING_ALREADY_EXISTS"
    DATE_CONFLICT = "DATE_CONFLICT"
    DUPLICATE_SUBMISSION = "DUPLICATE_SUBMISSION"
    UNKNOWN = "UNKNOWN"


class AssignmentError(Exception):
    """
    Base class for a rejected property assignment.

    Attributes:
        code: Machine-readable reason
        message: Human-readable text safe to show to staff
    """

    code: AssignmentErrorCode = AssignmentErrorCode.UNKNOWN

    def __init__(self, message: str, code: AssignmentErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class AssignmentValidationError(AssignmentError):
    """Required form field missing; raised before any network call."""


class AlreadyActive(AssignmentError):
    code = AssignmentErrorCode.ALREADY_ACTIVE

    def __init__(self, message: str = "The booking is already active") -> None:
        super().__init__(message)


class DateConflict(AssignmentError):
    code = AssignmentErrorCode.DATE_CONFLICT

    def __init__(self, message: str = "Property is unavailable for the selected dates") -> None:
        super().__init__(message)


class UnknownAssignmentError(AssignmentError):
    code = AssignmentErrorCode.UNKNOWN

    def __init__(
        self, message: str = "Error saving property assignment. Please try again."
    ) -> None:
        super().__init__(message)


class DuplicateSubmission(AssignmentError):
    code = AssignmentErrorCode.DUPLICATE_SUBMISSION

    def __init__(
        self, message: str = "This assignment was already submitted. Reset the form to submit again."
    ) -> None:
        super().__init__(message)


class UserManagementError(Exception):
    """An activate, deactivate or delete call on a platform user was rejected."""

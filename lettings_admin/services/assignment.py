"""
Submission of property assignments to the assignment endpoint.

A submission binds one booking date to one property. Required fields are checked
locally before anything is sent; server rejections are mapped onto the
AssignmentError hierarchy so callers can show the right message.
"""

from typing import Optional

import requests
import structlog

from lettings_admin.config import ASSIGNMENT_BACKEND_URL
from lettings_admin.errors import (
    AlreadyActive,
    AssignmentError,
    AssignmentErrorCode,
    AssignmentValidationError,
    DateConflict,
    DuplicateSubmission,
    UnknownAssignmentError,
)
from lettings_admin.metrics import assignment_submissions
from lettings_admin.network.client import request_json
from lettings_admin.schemas.assignment import AssignmentConfirmation, AssignmentForm

logger = structlog.get_logger(__name__)

ASSIGNMENT_PATH = "api/property-assignment"

DEFAULT_CONFIRMATION = "Property assigned successfully"

_OUTCOMES = {
    AssignmentErrorCode.ALREADY_ACTIVE: "already_active",
    AssignmentErrorCode.DATE_CONFLICT: "date_conflict",
    AssignmentErrorCode.DUPLICATE_SUBMISSION: "duplicate",
}


def validate_form(form: AssignmentForm) -> None:
    """
    Check the fields the assignment endpoint cannot do without.

    Raises:
        AssignmentValidationError: Naming the first missing field, or a reversed date range
    """
    if not form.booking_date_id.strip():
        raise AssignmentValidationError(
            "Booking ID is required", AssignmentErrorCode.MISSING_BOOKING_DATE_ID
        )
    if not form.property_id:
        raise AssignmentValidationError(
            "Property selection is required", AssignmentErrorCode.MISSING_PROPERTY
        )
    if not form.start_date:
        raise AssignmentValidationError("Start date is required", AssignmentErrorCode.MISSING_START_DATE)
    if not form.end_date:
        raise AssignmentValidationError("End date is required", AssignmentErrorCode.MISSING_END_DATE)
    if form.end_date < form.start_date:
        raise AssignmentValidationError(
            "End date cannot be before start date", AssignmentErrorCode.INVALID_DATE_RANGE
        )


def _rejection(body: dict) -> AssignmentError:
    code = body.get("code")
    server_message = body.get("error")

    if code == AssignmentErrorCode.ALREADY_ACTIVE.value:
        return AlreadyActive()
    if code == AssignmentErrorCode.DATE_CONFLICT.value:
        return DateConflict(server_message) if server_message else DateConflict()
    return UnknownAssignmentError(server_message) if server_message else UnknownAssignmentError()


def _record(outcome: str) -> None:
    assignment_submissions.labels(outcome=outcome).inc()


def submit_assignment(
    form: AssignmentForm, access_token: Optional[str] = None
) -> AssignmentConfirmation:
    """
    Validate a form and POST it to the assignment endpoint.

    Args:
        form: The completed assignment form
        access_token: Caller's bearer token, passed through

    Returns:
        AssignmentConfirmation: The server's confirmation message

    Raises:
        AssignmentValidationError: A required field is missing (nothing is sent)
        AlreadyActive: The booking date already has an active assignment
        DateConflict: The property is unavailable for the dates
        UnknownAssignmentError: Any other rejection or a transport failure
    """
    try:
        validate_form(form)
    except AssignmentValidationError as e:
        _record("validation")
        logger.info("assignment_invalid", code=e.code.value, message=e.message)
        raise

    payload = form.model_dump()
    payload["booking_date_id"] = form.booking_date_id.strip()

    try:
        body, status_code = request_json(
            "POST",
            ASSIGNMENT_PATH,
            access_token=access_token,
            json_body=payload,
            base_url=ASSIGNMENT_BACKEND_URL,
        )
    except requests.RequestException as e:
        _record("unknown")
        logger.error(
            "assignment_transport_failed", booking_date_id=payload["booking_date_id"], error=str(e)
        )
        raise UnknownAssignmentError() from e

    if not 200 <= status_code < 300:
        error = _rejection(body)
        _record(_OUTCOMES.get(error.code, "unknown"))
        logger.warning(
            "assignment_rejected",
            booking_date_id=payload["booking_date_id"],
            property_id=form.property_id,
            status_code=status_code,
            code=error.code.value,
        )
        raise error

    _record("confirmed")
    logger.info(
        "assignment_confirmed",
        booking_date_id=payload["booking_date_id"],
        property_id=form.property_id,
    )
    return AssignmentConfirmation(
        message=body.get("message") or DEFAULT_CONFIRMATION,
        booking_date_id=payload["booking_date_id"],
        property_id=form.property_id,
    )


class AssignmentWorkflow:
    """
    One assignment form from build to confirmation.

    Once a submission succeeds the workflow is closed: further submits raise
    DuplicateSubmission without touching the network until reset() is called.
    """

    def __init__(self, form: AssignmentForm, access_token: Optional[str] = None) -> None:
        self.form = form
        self.access_token = access_token
        self.confirmation: Optional[AssignmentConfirmation] = None
        self.error_message = ""

    @property
    def can_submit(self) -> bool:
        return self.confirmation is None

    def submit(self) -> AssignmentConfirmation:
        if not self.can_submit:
            _record("duplicate")
            logger.info("assignment_duplicate_blocked", booking_date_id=self.form.booking_date_id)
            raise DuplicateSubmission()

        try:
            self.confirmation = submit_assignment(self.form, self.access_token)
        except AssignmentError as e:
            self.error_message = e.message
            raise

        self.error_message = ""
        return self.confirmation

    def reset(self, form: Optional[AssignmentForm] = None) -> None:
        if form is not None:
            self.form = form
        self.confirmation = None
        self.error_message = ""

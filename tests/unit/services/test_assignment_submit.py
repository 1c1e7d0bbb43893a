"""
Unit tests for assignment submission and the submit-once workflow.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from lettings_admin.errors import (
    AlreadyActive,
    AssignmentErrorCode,
    AssignmentValidationError,
    DateConflict,
    DuplicateSubmission,
    UnknownAssignmentError,
)
from lettings_admin.schemas.assignment import AssignmentForm
from lettings_admin.services.assignment import AssignmentWorkflow, submit_assignment


@pytest.fixture
def complete_form() -> AssignmentForm:
    return AssignmentForm(
        booking_date_id="D1",
        property_id="P1",
        start_date="2024-06-01",
        end_date="2024-06-05",
        postcode="LS2 7HY",
        contractor_name="Dan Price",
        team_size=4,
    )


def respond(status_code: int, body: dict) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


@pytest.mark.unit
@pytest.mark.parametrize(
    "missing,message,code",
    [
        ("booking_date_id", "Booking ID is required", AssignmentErrorCode.MISSING_BOOKING_DATE_ID),
        ("property_id", "Property selection is required", AssignmentErrorCode.MISSING_PROPERTY),
        ("start_date", "Start date is required", AssignmentErrorCode.MISSING_START_DATE),
        ("end_date", "End date is required", AssignmentErrorCode.MISSING_END_DATE),
    ],
)
@patch("lettings_admin.network.client.requests.request")
def test_missing_field_rejected_without_network_call(
    mock_request: MagicMock,
    missing: str,
    message: str,
    code: AssignmentErrorCode,
    complete_form: AssignmentForm,
) -> None:
    form = complete_form.model_copy(update={missing: ""})

    with pytest.raises(AssignmentValidationError) as exc_info:
        submit_assignment(form)

    assert exc_info.value.message == message
    assert exc_info.value.code == code
    mock_request.assert_not_called()


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_whitespace_booking_id_is_missing(mock_request: MagicMock, complete_form: AssignmentForm) -> None:
    with pytest.raises(AssignmentValidationError, match="Booking ID is required"):
        submit_assignment(complete_form.model_copy(update={"booking_date_id": "   "}))
    mock_request.assert_not_called()


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_end_before_start_rejected(mock_request: MagicMock, complete_form: AssignmentForm) -> None:
    form = complete_form.model_copy(update={"end_date": "2024-05-30"})

    with pytest.raises(AssignmentValidationError) as exc_info:
        submit_assignment(form)

    assert exc_info.value.code == AssignmentErrorCode.INVALID_DATE_RANGE
    mock_request.assert_not_called()


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_successful_submission(mock_request: MagicMock, complete_form: AssignmentForm) -> None:
    mock_request.return_value = respond(200, {"message": "Property assigned and booking confirmed"})

    confirmation = submit_assignment(complete_form, access_token="tok")

    assert confirmation.message == "Property assigned and booking confirmed"
    assert confirmation.booking_date_id == "D1"
    assert confirmation.property_id == "P1"

    args, kwargs = mock_request.call_args
    assert args[0] == "POST"
    assert args[1].endswith("/api/property-assignment")
    assert kwargs["json"]["booking_date_id"] == "D1"
    assert kwargs["json"]["team_size"] == 4
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_already_active(mock_request: MagicMock, complete_form: AssignmentForm) -> None:
    mock_request.return_value = respond(409, {"code": "BOOKING_ALREADY_EXISTS", "error": "exists"})

    with pytest.raises(AlreadyActive) as exc_info:
        submit_assignment(complete_form)

    assert exc_info.value.message == "The booking is already active"


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_date_conflict_carries_server_message(
    mock_request: MagicMock, complete_form: AssignmentForm
) -> None:
    mock_request.return_value = respond(
        409, {"code": "DATE_CONFLICT", "error": "Mill House is booked 2024-06-03 to 2024-06-10"}
    )

    with pytest.raises(DateConflict) as exc_info:
        submit_assignment(complete_form)

    assert exc_info.value.message == "Mill House is booked 2024-06-03 to 2024-06-10"


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_date_conflict_without_message_uses_default(
    mock_request: MagicMock, complete_form: AssignmentForm
) -> None:
    mock_request.return_value = respond(409, {"code": "DATE_CONFLICT"})

    with pytest.raises(DateConflict, match="Property is unavailable for the selected dates"):
        submit_assignment(complete_form)


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_other_rejection_passes_message_through(
    mock_request: MagicMock, complete_form: AssignmentForm
) -> None:
    mock_request.return_value = respond(422, {"error": "Team size exceeds occupancy"})

    with pytest.raises(UnknownAssignmentError, match="Team size exceeds occupancy"):
        submit_assignment(complete_form)


@pytest.mark.unit
@patch("lettings_admin.network.client.requests.request")
def test_transport_failure_is_unknown(mock_request: MagicMock, complete_form: AssignmentForm) -> None:
    """POST is never retried; a connection error becomes an unknown assignment error."""
    mock_request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(UnknownAssignmentError, match="Error saving property assignment"):
        submit_assignment(complete_form)

    assert mock_request.call_count == 1


@pytest.mark.unit
@patch("lettings_admin.services.assignment.request_json")
def test_workflow_blocks_resubmission_until_reset(
    mock_request_json: MagicMock, complete_form: AssignmentForm
) -> None:
    mock_request_json.return_value = ({"message": "ok"}, 200)
    workflow = AssignmentWorkflow(complete_form)

    workflow.submit()
    assert workflow.can_submit is False

    with pytest.raises(DuplicateSubmission):
        workflow.submit()
    assert mock_request_json.call_count == 1

    workflow.reset()
    assert workflow.can_submit is True
    workflow.submit()
    assert mock_request_json.call_count == 2


@pytest.mark.unit
@patch("lettings_admin.services.assignment.request_json")
def test_workflow_allows_retry_after_failure(
    mock_request_json: MagicMock, complete_form: AssignmentForm
) -> None:
    mock_request_json.side_effect = [
        ({"code": "DATE_CONFLICT", "error": "Unavailable"}, 409),
        ({"message": "ok"}, 201),
    ]
    workflow = AssignmentWorkflow(complete_form)

    with pytest.raises(DateConflict):
        workflow.submit()
    assert workflow.error_message == "Unavailable"
    assert workflow.can_submit is True

    confirmation = workflow.submit()
    assert confirmation.message == "ok"
    assert workflow.error_message == ""

"""
Integration tests for the /admin routes.

The database dependency is overridden with the seeded SQLite engine; calls to
the admin backend are patched at the service boundary.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from lettings_admin.dependencies import get_db_engine
from lettings_admin.errors import AlreadyActive, DateConflict, UnknownAssignmentError, UserManagementError
from lettings_admin.main import app
from lettings_admin.schemas.assignment import AssignmentConfirmation
from lettings_admin.schemas.properties import DashboardStats, Property


@pytest.fixture
def client(seeded_engine: Engine) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db_engine] = lambda: seeded_engine
    yield TestClient(app)
    app.dependency_overrides.clear()


SUBMITTED_FORM = {
    "booking_date_id": "D1",
    "property_id": "P1",
    "start_date": "2024-06-01",
    "end_date": "2024-06-05",
}


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_list_bookings(client: TestClient) -> None:
    response = client.get("/admin/bookings")

    assert response.status_code == 200
    data = response.json()
    assert [b["id"] for b in data] == ["R1-D1", "R1-D2", "R2"]
    assert data[1]["status"] == "active"
    assert data[1]["ref"] == {"request_id": "R1", "date_id": "D2"}
    assert data[1]["is_assignable"] is False


@pytest.mark.integration
def test_list_bookings_with_filters(client: TestClient) -> None:
    response = client.get("/admin/bookings", params={"status": "active", "unknown": "x"})

    assert [b["id"] for b in response.json()] == ["R1-D2"]


@pytest.mark.integration
def test_booking_prefill(client: TestClient) -> None:
    response = client.get("/admin/booking-dates/D2/prefill")

    assert response.status_code == 200
    data = response.json()
    assert data["booking_date_id"] == "D2"
    assert data["start_date"] == "2024-07-01"
    assert data["contractor_name"] == "Dan Price"


@pytest.mark.integration
def test_booking_prefill_not_found(client: TestClient) -> None:
    response = client.get("/admin/booking-dates/D404/prefill")

    assert response.status_code == 404
    assert response.json()["detail"] == "Booking ID not found. Please check and try again."


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@pytest.mark.integration
@patch("lettings_admin.routes.properties.get_all_properties")
def test_list_properties_passes_token_and_filters(mock_get: MagicMock, client: TestClient) -> None:
    mock_get.return_value = [
        Property(id="P1", property_name="Mill House", bedrooms=3),
        Property(id="P2", property_name="Canal Flat", bedrooms=1),
    ]

    response = client.get(
        "/admin/properties", params={"bedrooms": "2"}, headers={"Authorization": "Bearer tok"}
    )

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == ["P1"]
    mock_get.assert_called_once_with("tok")


@pytest.mark.integration
@patch("lettings_admin.routes.properties.get_dashboard_stats")
def test_stats(mock_stats: MagicMock, client: TestClient) -> None:
    mock_stats.return_value = DashboardStats(total_properties=7, pending_bookings=2)

    response = client.get("/admin/stats")

    assert response.status_code == 200
    assert response.json()["totalProperties"] == 7
    assert response.json()["pendingBookings"] == 2


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_assignment_form_for_existing_booking(client: TestClient) -> None:
    payload = {
        "booking": {
            "id": "R1-D1",
            "ref": {"request_id": "R1", "date_id": "D1"},
            "booking_request_id": "R1",
            "booking_dates": [{"id": "D1", "start_date": "2024-06-01", "end_date": "2024-06-05"}],
        },
        "property": {"id": "P1", "landlord_id": "L1", "property_name": "Mill House", "postcode": "LS1 4AP"},
    }

    response = client.post("/admin/assignments/form", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["booking_date_id"] == "D1"
    assert data["contractor_name"] == "Dan Price"
    assert data["landlord_name"] == "Mary Shaw"
    assert data["postcode"] == "LS2 7HY"


@pytest.mark.integration
def test_assignment_form_for_walk_up(client: TestClient) -> None:
    payload = {
        "property": {"id": "P1", "property_name": "Mill House", "postcode": "LS1 4AP"},
        "is_new_booking": True,
    }

    response = client.post("/admin/assignments/form", json=payload)

    data = response.json()
    assert data["postcode"] == "LS1 4AP"
    assert data["booking_date_id"] == ""
    assert data["contractor_name"] == ""


@pytest.mark.integration
@patch("lettings_admin.network.client.requests.request")
def test_submit_missing_field_is_400(mock_request: MagicMock, client: TestClient) -> None:
    response = client.post("/admin/assignments", json={**SUBMITTED_FORM, "property_id": ""})

    assert response.status_code == 400
    assert response.json()["detail"] == {
        "code": "MISSING_PROPERTY",
        "message": "Property selection is required",
    }
    mock_request.assert_not_called()


@pytest.mark.integration
@patch("lettings_admin.routes.assignments.submit_assignment")
def test_submit_success(mock_submit: MagicMock, client: TestClient) -> None:
    mock_submit.return_value = AssignmentConfirmation(
        message="Property assigned", booking_date_id="D1", property_id="P1"
    )

    response = client.post(
        "/admin/assignments", json=SUBMITTED_FORM, headers={"Authorization": "Bearer tok"}
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Property assigned"
    assert mock_submit.call_args[0][1] == "tok"


@pytest.mark.integration
@pytest.mark.parametrize(
    "error,status_code,code",
    [
        (AlreadyActive(), 409, "BOOKING_ALREADY_EXISTS"),
        (DateConflict("Booked 3-10 June"), 409, "DATE_CONFLICT"),
        (UnknownAssignmentError(), 502, "UNKNOWN"),
    ],
)
@patch("lettings_admin.routes.assignments.submit_assignment")
def test_submit_rejections(
    mock_submit: MagicMock, error: Exception, status_code: int, code: str, client: TestClient
) -> None:
    mock_submit.side_effect = error

    response = client.post("/admin/assignments", json=SUBMITTED_FORM)

    assert response.status_code == status_code
    assert response.json()["detail"]["code"] == code


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.mark.integration
@patch("lettings_admin.routes.users.activate_user")
def test_activate_user(mock_activate: MagicMock, client: TestClient) -> None:
    response = client.put(
        "/admin/users/contractor/U1/activate", headers={"Authorization": "Bearer tok"}
    )

    assert response.status_code == 200
    mock_activate.assert_called_once_with("U1", "contractor", "tok")


@pytest.mark.integration
@patch("lettings_admin.routes.users.delete_user")
def test_delete_user_rejected(mock_delete: MagicMock, client: TestClient) -> None:
    mock_delete.side_effect = UserManagementError("Failed to delete user: not allowed")

    response = client.delete("/admin/users/landlord/L1")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to delete user: not allowed"

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from lettings_admin.dependencies import get_access_token, get_db_engine
from lettings_admin.errors import (
    AlreadyActive,
    AssignmentError,
    AssignmentValidationError,
    DateConflict,
)
from lettings_admin.schemas.assignment import (
    AssignmentConfirmation,
    AssignmentForm,
    AssignmentFormRequest,
)
from lettings_admin.services.assignment import submit_assignment
from lettings_admin.services.assignment_form import build_assignment_form

logger = structlog.get_logger(__name__)
router = APIRouter()


def _status_for(error: AssignmentError) -> int:
    if isinstance(error, AssignmentValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, (AlreadyActive, DateConflict)):
        return status.HTTP_409_CONFLICT
    return status.HTTP_502_BAD_GATEWAY


@router.post("/assignments/form", response_model=AssignmentForm)
def create_assignment_form(
    payload: AssignmentFormRequest, engine: Engine = Depends(get_db_engine)
) -> AssignmentForm:
    """
    Build the editable assignment form for a booking and a property.

    Send is_new_booking=true with an empty booking for a walk-up booking.
    """
    return build_assignment_form(engine, payload.booking, payload.property, payload.is_new_booking)


@router.post("/assignments", response_model=AssignmentConfirmation)
def create_assignment(
    form: AssignmentForm, access_token: Optional[str] = Depends(get_access_token)
) -> AssignmentConfirmation:
    """
    Submit a property assignment.

    Returns:
        AssignmentConfirmation: The backend's confirmation

    Raises:
        HTTPException: 400 for a missing required field, 409 when the booking is
            already active or the property is unavailable, 502 for anything else
    """
    try:
        return submit_assignment(form, access_token)
    except AssignmentError as e:
        raise HTTPException(
            status_code=_status_for(e),
            detail={"code": e.code.value, "message": e.message},
        )

from __future__ import annotations

from typing import Callable, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from lettings_admin.dependencies import get_access_token
from lettings_admin.errors import UserManagementError
from lettings_admin.schemas.users import AdminUser, PlatformUser
from lettings_admin.services.users import (
    activate_user,
    deactivate_user,
    delete_user,
    list_administrators,
    list_platform_users,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


def _run_or_502(action: Callable[..., None], user_id: str, table_name: str, access_token: Optional[str]) -> None:
    try:
        action(user_id, table_name, access_token)
    except UserManagementError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/users/administrators", response_model=list[AdminUser])
def get_administrators(access_token: Optional[str] = Depends(get_access_token)) -> list[AdminUser]:
    return list_administrators(access_token)


@router.get("/users/platform", response_model=list[PlatformUser])
def get_platform_users(
    access_token: Optional[str] = Depends(get_access_token),
) -> list[PlatformUser]:
    """Contractors and landlords; display_type reads Client or Partner."""
    return list_platform_users(access_token)


@router.put("/users/{table_name}/{user_id}/activate")
def put_activate_user(
    table_name: str, user_id: str, access_token: Optional[str] = Depends(get_access_token)
) -> dict[str, str]:
    _run_or_502(activate_user, user_id, table_name, access_token)
    return {"message": "User activated"}


@router.put("/users/{table_name}/{user_id}/deactivate")
def put_deactivate_user(
    table_name: str, user_id: str, access_token: Optional[str] = Depends(get_access_token)
) -> dict[str, str]:
    _run_or_502(deactivate_user, user_id, table_name, access_token)
    return {"message": "User deactivated"}


@router.delete("/users/{table_name}/{user_id}")
def remove_user(
    table_name: str, user_id: str, access_token: Optional[str] = Depends(get_access_token)
) -> dict[str, str]:
    """Permanently delete a contractor or landlord account."""
    _run_or_502(delete_user, user_id, table_name, access_token)
    return {"message": "User deleted"}

"""
Administrator and platform user management through the admin backend.

Listings degrade to [] when the backend cannot be read. Activate, deactivate
and delete raise UserManagementError carrying the server's error text so the
caller can report it.
"""

from typing import Any, Optional

import requests
import structlog

from lettings_admin.errors import UserManagementError
from lettings_admin.network.client import request_json
from lettings_admin.schemas.users import AdminUser, PlatformUser
from lettings_admin.services.catalog import fetch_body, parse_records

logger = structlog.get_logger(__name__)

ADMIN_USERS_PATH = "api/admin-users"
PLATFORM_USERS_PATH = "api/platform-users"

MISSING_TABLE_MESSAGE = "Unable to determine user type. Please refresh and try again."


def _users(path: str, model: Any, access_token: Optional[str]) -> list[Any]:
    body = fetch_body(path, access_token)
    if body is None:
        return []

    if not body.get("success") or not isinstance(body.get("users"), list):
        logger.error("user_listing_invalid", path=path)
        return []

    users = parse_records(model, body["users"], "user")
    logger.info("users_fetched", path=path, count=len(users), counts=body.get("counts"))
    return users


def list_administrators(access_token: Optional[str] = None) -> list[AdminUser]:
    return _users(ADMIN_USERS_PATH, AdminUser, access_token)


def list_platform_users(access_token: Optional[str] = None) -> list[PlatformUser]:
    """Contractors and landlords in one list, each tagged with its table name."""
    return _users(PLATFORM_USERS_PATH, PlatformUser, access_token)


def _mutate(
    action: str,
    method: str,
    path: str,
    user_id: str,
    table_name: str,
    access_token: Optional[str],
    json_body: Optional[dict[str, Any]] = None,
) -> None:
    if not table_name:
        logger.warning("user_mutation_missing_table", action=action, user_id=user_id)
        raise UserManagementError(MISSING_TABLE_MESSAGE)

    try:
        body, status_code = request_json(method, path, access_token=access_token, json_body=json_body)
    except requests.RequestException as e:
        logger.error("user_mutation_failed", action=action, user_id=user_id, error=str(e))
        raise UserManagementError(f"Failed to {action} user: {e}") from e

    if not 200 <= status_code < 300 or not body.get("success"):
        error = body.get("error") or "Unknown error"
        logger.warning(
            "user_mutation_rejected",
            action=action,
            user_id=user_id,
            table_name=table_name,
            status_code=status_code,
            error=error,
        )
        raise UserManagementError(f"Failed to {action} user: {error}")

    logger.info("user_mutated", action=action, user_id=user_id, table_name=table_name)


def activate_user(user_id: str, table_name: str, access_token: Optional[str] = None) -> None:
    """
    Re-enable a contractor or landlord account.

    Args:
        user_id: Account id
        table_name: Table holding the account (e.g. "contractor", "landlord")
        access_token: Caller's bearer token

    Raises:
        UserManagementError: If table_name is empty or the backend refused
    """
    _mutate(
        "activate",
        "PUT",
        f"{ADMIN_USERS_PATH}/activate",
        user_id,
        table_name,
        access_token,
        {"userId": user_id, "tableName": table_name},
    )


def deactivate_user(user_id: str, table_name: str, access_token: Optional[str] = None) -> None:
    _mutate(
        "deactivate",
        "PUT",
        f"{ADMIN_USERS_PATH}/deactivate",
        user_id,
        table_name,
        access_token,
        {"userId": user_id, "tableName": table_name},
    )


def delete_user(user_id: str, table_name: str, access_token: Optional[str] = None) -> None:
    """Permanently remove an account. There is no undo."""
    _mutate(
        "delete",
        "DELETE",
        f"{ADMIN_USERS_PATH}/{table_name}/{user_id}",
        user_id,
        table_name,
        access_token,
    )

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from lettings_admin.models.profiles import Contractor, Landlord

landlords = Landlord.__table__
contractors = Contractor.__table__


def get_landlord(conn: Connection, landlord_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a landlord profile by id.

    Args:
        conn (Connection): Active SQLAlchemy connection
        landlord_id (str): landlord.id (properties.landlord_id)

    Returns:
        Optional[dict]: The profile row, or None if not found
    """
    row = conn.execute(select(landlords).where(landlords.c.id == landlord_id)).mappings().fetchone()
    return dict(row) if row else None


def get_contractor(conn: Connection, contractor_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a contractor profile by id.

    Args:
        conn (Connection): Active SQLAlchemy connection
        contractor_id (str): contractor.id (booking_requests.user_id)

    Returns:
        Optional[dict]: The profile row, or None if not found
    """
    row = conn.execute(
        select(contractors).where(contractors.c.id == contractor_id)
    ).mappings().fetchone()
    return dict(row) if row else None

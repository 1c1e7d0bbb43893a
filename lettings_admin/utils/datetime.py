"""UTC datetime and calendar date utilities."""

from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def iso_date(value: Optional[Union[date, str]]) -> str:
    """
    Render a calendar date the way assignment forms carry it.

    Args:
        value: Date, an already formatted date string, or None

    Returns:
        "YYYY-MM-DD", or "" for None
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value or ""

"""
FastAPI dependency injection providers.

Routes receive the database engine and the caller's bearer token through these
providers, so tests can swap either one with app.dependency_overrides.
"""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Header
from sqlalchemy.engine import Engine

from lettings_admin.db.engine import engine

BEARER_PREFIX = "bearer "


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> from unittest.mock import Mock
        >>> from fastapi.testclient import TestClient
        >>>
        >>> mock_engine = Mock(spec=Engine)
        >>> app.dependency_overrides[get_db_engine] = lambda: mock_engine
        >>>
        >>> client = TestClient(app)
        >>> response = client.get("/admin/bookings")
    """
    yield engine


def get_access_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """
    Extract the caller's bearer token so it can be passed through to the admin backend.

    The token is neither issued nor verified here; the backend does that.

    Args:
        authorization: Raw Authorization header

    Returns:
        Optional[str]: The token, or None when the header is absent or not a bearer token
    """
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None

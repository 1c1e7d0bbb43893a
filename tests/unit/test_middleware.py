"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from lettings_admin.middleware import RequestIDMiddleware


@pytest.fixture
def app_with_middleware() -> FastAPI:
    """Create FastAPI app with RequestIDMiddleware for testing."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict[str, str]:
        """Return the request ID from state and from the structlog context."""
        bound = structlog.contextvars.get_contextvars()
        return {"request_id": request.state.request_id, "bound": bound.get("request_id", "")}

    return app


@pytest.fixture
def client(app_with_middleware: FastAPI) -> TestClient:
    """FastAPI test client with middleware."""
    return TestClient(app_with_middleware)


@pytest.mark.unit
def test_request_id_header_matches_state(client: TestClient) -> None:
    """The X-Request-ID header carries the same UUID stored on request.state."""
    response = client.get("/test")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36  # UUID length
    assert response.headers["X-Request-ID"] == response.json()["request_id"]


@pytest.mark.unit
def test_request_id_bound_for_logging(client: TestClient) -> None:
    """Log lines emitted while handling the request carry its request_id."""
    response = client.get("/test")

    data = response.json()
    assert data["bound"] == data["request_id"]


@pytest.mark.unit
def test_request_id_unique_per_request(client: TestClient) -> None:
    response1 = client.get("/test")
    response2 = client.get("/test")

    assert response1.headers["X-Request-ID"] != response2.headers["X-Request-ID"]

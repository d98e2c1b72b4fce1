"""
Basic application tests.

Validates that the FastAPI app starts correctly, the health
endpoints respond as expected and security headers are applied.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.interfaces.qualitative.dependencies import get_db_engine
from app.main import app
from app.shared.security.headers import SECURE_HEADERS

client = TestClient(app)


@pytest.fixture
def store_engine(engine):
    app.dependency_overrides[get_db_engine] = lambda: engine
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def broken_store():
    broken = MagicMock()
    broken.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    app.dependency_overrides[get_db_engine] = lambda: broken
    yield
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self) -> None:
        """Health endpoint must return status and version fields."""
        response = client.get("/api/v1/health")
        body = response.json()
        assert body["status"] == "ok"
        assert "version" in body


class TestReadinessEndpoint:
    """Tests for the readiness check."""

    def test_ready_when_store_answers(self, store_engine) -> None:
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["store"] == "up"

    def test_unavailable_when_store_is_down(self, broken_store) -> None:
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"


class TestSecurityHeaders:
    """Tests for security headers on responses."""

    def test_security_headers_present(self) -> None:
        """All security headers must be present on every response."""
        response = client.get("/api/v1/health")
        for name, value in SECURE_HEADERS.items():
            assert response.headers[name] == value
        assert "Cache-Control" not in response.headers

    def test_operator_routes_are_not_cached(self) -> None:
        """Admin responses, errors included, carry Cache-Control: no-store."""
        response = client.get("/api/v1/qualitative-review")
        assert response.status_code == 401
        assert response.headers["Cache-Control"] == "no-store"

"""
Health endpoint tests.
"""

import pytest
from fastapi.testclient import TestClient

from clinicslots.app import create_app
from clinicslots.core.config import reset_settings


@pytest.fixture
def client(monkeypatch):
    """Create a test client for the FastAPI app on the memory backend."""
    monkeypatch.setenv("DB_BACKEND", "memory")
    monkeypatch.setenv("BOOKING_RELEASE_RETRY_ENABLED", "false")
    reset_settings()
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_settings()


def test_health_endpoint(client):
    """Test that the /health endpoint returns 200 OK."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert data["data"]["service"] == "Clinic-Slots"
    assert "timestamp" in data["data"]
    assert "version" in data["data"]


def test_health_ready_endpoint(client):
    """Readiness reports wired services on the memory backend."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ready"] is True
    assert data["checks"] == {"services": "ok", "database": "memory"}
    assert data["active_locks"] == 0


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"
    assert "X-Process-Time" in response.headers


def test_root_endpoint(client):
    """Test that the root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Clinic-Slots"
    assert data["status"] == "running"
    assert "book" in data["endpoints"]

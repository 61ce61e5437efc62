"""Tests for main application endpoints."""

from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app

client = TestClient(app)


def test_root_endpoint():
    """Test root endpoint returns the service name and version."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == settings.PROJECT_NAME
    assert data["version"] == settings.VERSION


def test_health_check():
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "meter-readings"

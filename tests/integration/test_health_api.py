"""Tests for health check endpoints."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from jks_orchestrator import __version__
from jks_orchestrator.application import create_app


@pytest.fixture
def client():
    """Create test client."""
    app = create_app()
    return TestClient(app)


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert "message" in data
    assert "X-Trace-ID" in response.headers


def test_docs_disabled_by_default(client):
    assert client.get("/docs").status_code == status.HTTP_404_NOT_FOUND

"""Tests for health endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from fastapi import FastAPI
    from psipro.api.routes import health

    app = FastAPI()
    app.include_router(health.router)
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "psipro"

    def test_liveness_check(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

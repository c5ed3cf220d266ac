"""Tests for health check endpoint."""

from unittest.mock import patch

import pytest
from django.test import Client


@pytest.fixture()
def test_client() -> Client:
    """Return a Django test client."""
    return Client()


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for the health check endpoint."""

    def test_health_check_returns_200(self, test_client: Client) -> None:
        """Health check endpoint should return 200 when healthy."""
        response = test_client.get("/health/")

        assert response.status_code == 200
        assert response["Content-Type"] == "application/json"

    def test_health_check_reports_every_check(self, test_client: Client) -> None:
        """Health check response should contain database and cache checks."""
        data = test_client.get("/health/").json()

        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["cache"]["status"] == "healthy"

    def test_health_check_returns_503_when_database_unhealthy(
        self, test_client: Client
    ) -> None:
        """Health check should return 503 when database is unhealthy."""
        with patch("core.health.connection") as mock_connection:
            mock_connection.cursor.side_effect = Exception("Database error")
            response = test_client.get("/health/")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert "Database error" in data["checks"]["database"]["error"]

    def test_health_check_returns_503_when_cache_unhealthy(self, test_client: Client) -> None:
        """Health check should return 503 when the cache rejects writes."""
        with patch("core.health.cache") as mock_cache:
            mock_cache.set.side_effect = ConnectionError("Redis unreachable")
            response = test_client.get("/health/")

        assert response.status_code == 503
        data = response.json()
        assert data["checks"]["cache"]["status"] == "unhealthy"
        assert data["checks"]["database"]["status"] == "healthy"

    def test_health_check_detects_cache_miss(self, test_client: Client) -> None:
        """A cache that loses the probe value is unhealthy."""
        with patch("core.health.cache") as mock_cache:
            mock_cache.get.return_value = None
            response = test_client.get("/health/")

        assert response.status_code == 503
        assert "probe" in response.json()["checks"]["cache"]["error"]

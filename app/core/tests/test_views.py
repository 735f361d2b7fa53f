"""
Tests for the health check endpoint.
"""

from unittest import mock

from django.db import DatabaseError


class TestHealthCheck:
    def test_healthy(self, client, db):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_database_unreachable(self, client, db):
        with mock.patch(
            "django.db.backends.base.base.BaseDatabaseWrapper.cursor",
            side_effect=DatabaseError("down"),
        ):
            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

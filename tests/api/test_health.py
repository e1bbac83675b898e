"""
Tests for the health check endpoint.
"""

from sqlalchemy.exc import OperationalError

from finance_tracker.main import app
from finance_tracker.models.base import get_db


def test_health_check_returns_200(client):
    """The app starts and answers at all."""
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    data = client.get("/health").json()
    assert data["service"] == "finance-tracker"
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"


def test_health_check_reports_unreachable_database(client):
    """
    A failing database is reported, not raised.

    Uptime checks read the body, so the endpoint still answers
    200 with a degraded status.
    """
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    app.dependency_overrides[get_db] = lambda: BrokenSession()

    response = client.get("/health")
    data = response.json()
    assert response.status_code == 200
    assert data["status"] == "degraded"
    assert data["database"] == "unhealthy"

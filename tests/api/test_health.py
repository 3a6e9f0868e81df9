"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    """
    Verify the health endpoint responds with HTTP 200.

    If the application cannot answer this, nothing else
    will work either.
    """
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    """
    Verify the response includes the correct service name.

    Monitoring systems parse this field, so changes to it
    must be deliberate.
    """
    response = client.get("/health")
    data = response.json()
    assert data["service"] == "grc-backoffice"


def test_health_check_reports_database_status(client):
    response = client.get("/health")
    data = response.json()
    assert data["database"] == "healthy"
    assert data["status"] == "healthy"


def test_health_check_reports_scheduler_stopped_in_tests(client):
    """The test app never starts the background scheduler."""
    response = client.get("/health")
    assert response.json()["scheduler"] == "stopped"

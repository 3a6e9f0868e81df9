"""
Tests for the GDPR data subject request endpoints.
"""

from datetime import datetime, timedelta, timezone

from grc_backoffice.models.audit_log import AuditLog

REQUEST = {
    "request_type": "erasure",
    "requester_name": "Jane Roe",
    "requester_email": "jane@example.com",
    "request_details": "Please delete my account",
}


class TestDSREndpoints:

    def test_public_submission_needs_no_login(self, client, db_session):
        response = client.post("/api/v1/gdpr/dsr/public", json=REQUEST)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "submitted"
        assert data["priority"] == "normal"
        today = datetime.now(timezone.utc).date()
        assert data["deadline_date"] == str(today + timedelta(days=30))
        assert db_session.query(AuditLog).count() == 0

    def test_invalid_request_type_is_400(self, client):
        response = client.post(
            "/api/v1/gdpr/dsr/public", json={**REQUEST, "request_type": "delete-all"}
        )
        assert response.status_code == 400

    def test_staff_create_is_admin_only(self, client, users, user_headers, admin_headers):
        denied = client.post("/api/v1/gdpr/dsr", json=REQUEST, headers=user_headers)
        created = client.post("/api/v1/gdpr/dsr", json=REQUEST, headers=admin_headers)

        assert denied.status_code == 403
        assert created.status_code == 201

    def test_admin_completes(self, client, users, admin_headers):
        dsr = client.post("/api/v1/gdpr/dsr/public", json=REQUEST).json()

        response = client.post(
            f"/api/v1/gdpr/dsr/{dsr['id']}/complete",
            json={"response_summary": "Account and backups erased"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["completed_date"] is not None
        assert data["deadline_date"] == dsr["deadline_date"]

    def test_complete_twice_is_409(self, client, users, admin_headers):
        dsr = client.post("/api/v1/gdpr/dsr/public", json=REQUEST).json()
        url = f"/api/v1/gdpr/dsr/{dsr['id']}/complete"

        client.post(url, json={"response_summary": "done"}, headers=admin_headers)
        response = client.post(url, json={"response_summary": "again"}, headers=admin_headers)

        assert response.status_code == 409

    def test_metrics(self, client, users, user_headers):
        client.post("/api/v1/gdpr/dsr/public", json=REQUEST)

        metrics = client.get("/api/v1/gdpr/dsr/metrics", headers=user_headers).json()

        assert metrics["total"] == 1
        assert metrics["by_status"]["submitted"] == 1

"""
Tests for the record of processing activities endpoints.
"""

RECORD = {
    "activity_name": "Payroll",
    "data_controller_details": "Example Ltd, 1 Main St",
    "data_categories": "Name, bank details",
    "data_subject_categories": "Employees",
    "retention_period": "7 years",
}


class TestROPAEndpoints:

    def test_create_is_admin_only(self, client, users, admin_headers, user_headers):
        denied = client.post("/api/v1/gdpr/ropa", json=RECORD, headers=user_headers)
        created = client.post("/api/v1/gdpr/ropa", json=RECORD, headers=admin_headers)

        assert denied.status_code == 403
        assert created.status_code == 201
        assert created.json()["status"] == "draft"

    def test_missing_controller_details_is_400(self, client, users, admin_headers):
        body = {k: v for k, v in RECORD.items() if k != "data_controller_details"}

        response = client.post("/api/v1/gdpr/ropa", json=body, headers=admin_headers)

        assert response.status_code == 400

    def test_archive_hides_from_register(self, client, users, admin_headers, user_headers):
        record = client.post("/api/v1/gdpr/ropa", json=RECORD, headers=admin_headers).json()
        url = f"/api/v1/gdpr/ropa/{record['id']}"

        archived = client.delete(url, headers=admin_headers)

        assert archived.status_code == 200
        assert archived.json()["status"] == "archived"
        assert client.get("/api/v1/gdpr/ropa", headers=user_headers).json() == []
        assert client.get(url, headers=user_headers).json()["status"] == "archived"

        metrics = client.get("/api/v1/gdpr/ropa/metrics", headers=user_headers).json()
        assert metrics["archived"] == 1
        assert metrics["total_processing_activities"] == 1

    def test_update(self, client, users, admin_headers):
        record = client.post("/api/v1/gdpr/ropa", json=RECORD, headers=admin_headers).json()

        response = client.put(
            f"/api/v1/gdpr/ropa/{record['id']}",
            json={"status": "active", "recipients": "HMRC"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert response.json()["recipients"] == "HMRC"

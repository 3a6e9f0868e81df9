"""
Tests for the risk register endpoints.
"""

import uuid

from grc_backoffice.models.risk import RiskAssessment


class TestRiskEndpoints:

    def test_create_computes_score(self, client, users, admin_headers):
        response = client.post(
            "/api/v1/risks",
            json={"title": "Phishing", "likelihood": 4, "impact": 3},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["risk_score"] == 12
        assert data["severity"] == "High"

    def test_create_is_admin_only(self, client, users, user_headers):
        response = client.post(
            "/api/v1/risks",
            json={"title": "Phishing", "likelihood": 4, "impact": 3},
            headers=user_headers,
        )
        assert response.status_code == 403

    def test_out_of_range_likelihood_is_400(self, client, users, admin_headers):
        response = client.post(
            "/api/v1/risks",
            json={"title": "Phishing", "likelihood": 6, "impact": 3},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_distribution(self, client, users, admin_headers, user_headers):
        for likelihood, impact in ((5, 5), (1, 1)):
            client.post(
                "/api/v1/risks",
                json={"title": "r", "likelihood": likelihood, "impact": impact},
                headers=admin_headers,
            )

        response = client.get("/api/v1/risks/distribution", headers=user_headers)

        counts = {b["severity"]: b["count"] for b in response.json()}
        assert counts == {"Critical": 1, "High": 0, "Medium": 0, "Low": 1}

    def test_unknown_owner_is_404(self, client, db_session, users, admin_headers):
        response = client.post(
            "/api/v1/risks",
            json={
                "title": "Phishing",
                "likelihood": 4,
                "impact": 3,
                "owner_id": str(uuid.uuid4()),
            },
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert db_session.query(RiskAssessment).count() == 0

    def test_update_to_unknown_owner_is_404(self, client, users, admin_headers):
        risk = client.post(
            "/api/v1/risks",
            json={"title": "Phishing", "likelihood": 4, "impact": 3},
            headers=admin_headers,
        ).json()

        response = client.put(
            f"/api/v1/risks/{risk['id']}",
            json={"owner_id": str(uuid.uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 404

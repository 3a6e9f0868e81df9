"""
Tests for the ticket endpoints, both the customer-facing API-key
routes and the internal JWT routes.
"""


def create_external(client, headers, ref="ACME-001"):
    return client.post(
        "/api/v1/tickets/external",
        json={"title": "Cannot download invoice", "external_customer_ref": ref},
        headers=headers,
    )


class TestExternalTickets:

    def test_api_key_required(self, client):
        response = create_external(client, {})
        assert response.status_code == 401

    def test_wrong_api_key(self, client):
        response = create_external(client, {"X-API-Key": "wrong"})
        assert response.status_code == 401

    def test_create_external(self, client, api_key_headers):
        response = create_external(client, api_key_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["ticket_type"] == "external"
        assert data["status"] == "new"
        assert data["sequential_id"] == 1

    def test_customer_view_hides_internal_notes(
        self, client, users, api_key_headers, admin_headers
    ):
        ticket = create_external(client, api_key_headers).json()
        client.post(
            f"/api/v1/tickets/{ticket['id']}/comments",
            json={"body": "Looking into it"},
            headers=admin_headers,
        )
        client.post(
            f"/api/v1/tickets/{ticket['id']}/comments",
            json={"body": "Billing bug, see incident 12", "is_internal_note": True},
            headers=admin_headers,
        )

        response = client.get(
            "/api/v1/tickets/external/ACME-001", headers=api_key_headers
        )

        assert response.status_code == 200
        comments = response.json()[0]["comments"]
        assert [c["body"] for c in comments] == ["Looking into it"]

        staff_view = client.get(
            f"/api/v1/tickets/{ticket['id']}", headers=admin_headers
        ).json()
        assert len(staff_view["comments"]) == 2


class TestInternalTickets:

    def test_create_and_list_own(self, client, users, user_headers, john_headers):
        response = client.post(
            "/api/v1/tickets",
            json={"title": "Rotate backup keys", "category": "crypto"},
            headers=user_headers,
        )
        assert response.status_code == 201

        mine = client.get("/api/v1/tickets", headers=user_headers).json()
        johns = client.get("/api/v1/tickets", headers=john_headers).json()

        assert len(mine) == 1
        assert johns == []

    def test_other_users_ticket_is_403(self, client, users, user_headers, john_headers):
        ticket = client.post(
            "/api/v1/tickets", json={"title": "private"}, headers=john_headers
        ).json()

        response = client.get(f"/api/v1/tickets/{ticket['id']}", headers=user_headers)

        assert response.status_code == 403

    def test_only_admin_updates(self, client, users, user_headers, admin_headers):
        ticket = client.post(
            "/api/v1/tickets", json={"title": "x"}, headers=user_headers
        ).json()

        denied = client.patch(
            f"/api/v1/tickets/{ticket['id']}",
            json={"status": "resolved"},
            headers=user_headers,
        )
        allowed = client.patch(
            f"/api/v1/tickets/{ticket['id']}",
            json={"status": "resolved"},
            headers=admin_headers,
        )

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["resolved_at"] is not None

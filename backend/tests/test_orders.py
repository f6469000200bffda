"""
Tests for the order endpoints.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from tests.conftest import new_id


def place(client, user_id, menu_id):
    return client.post("/api/orders", json={"user_id": user_id, "menu_id": menu_id})


class TestOrderCreate:
    """POST /api/orders is public."""

    def test_create_pending(self, client, seed_user, seed_menu):
        response = place(client, seed_user.id, seed_menu.id)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully."
        assert body["data"]["state"] == "pending"
        assert body["data"]["user_id"] == seed_user.id
        assert body["data"]["menu_id"] == seed_menu.id

    def test_unknown_user(self, client, seed_menu):
        response = place(client, new_id(), seed_menu.id)
        assert response.status_code == 400
        assert response.json()["message"] == "user_id does not reference an existing user."

    def test_unknown_menu(self, client, seed_user):
        response = place(client, seed_user.id, 404)
        assert response.status_code == 400
        assert response.json()["message"] == "menu_id does not reference an existing menu."

    def test_malformed_user_id(self, client, seed_menu):
        response = place(client, "abc", seed_menu.id)
        assert response.status_code == 400
        assert response.json()["message"] == "user_id must be a valid UUID."

    @pytest.mark.parametrize("menu_id", [0, "1", None])
    def test_invalid_menu_id(self, client, seed_user, menu_id):
        response = place(client, seed_user.id, menu_id)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body."


class TestOrderRead:
    """GET /api/orders and GET /api/orders/{id}."""

    def test_list_newest_first(self, client, seed_user, seed_menu):
        first = place(client, seed_user.id, seed_menu.id).json()["data"]["id"]
        second = place(client, seed_user.id, seed_menu.id).json()["data"]["id"]

        orders = client.get("/api/orders").json()["data"]["orders"]
        assert [o["id"] for o in orders] == [second, first]

    def test_get(self, client, seed_user, seed_menu):
        order_id = place(client, seed_user.id, seed_menu.id).json()["data"]["id"]
        response = client.get(f"/api/orders/{order_id}")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == order_id

    def test_get_unknown(self, client):
        response = client.get("/api/orders/77")
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found."

    def test_invalid_id(self, client):
        response = client.get("/api/orders/abc")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid order id."


class TestOrderUpdate:
    """PATCH /api/orders/{id} (staff)."""

    @pytest.fixture
    def order_id(self, client, seed_user, seed_menu):
        return place(client, seed_user.id, seed_menu.id).json()["data"]["id"]

    def test_requires_staff_key(self, client, order_id):
        response = client.patch(f"/api/orders/{order_id}", json={"state": "served"})
        assert response.status_code == 401

    def test_admin_key_is_accepted(self, client, admin_headers, order_id):
        response = client.patch(f"/api/orders/{order_id}", json={"state": "preparing"}, headers=admin_headers)
        assert response.status_code == 200

    def test_state_change(self, client, maid_headers, order_id):
        response = client.patch(f"/api/orders/{order_id}", json={"state": "served"}, headers=maid_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Order updated successfully."
        assert response.json()["data"]["state"] == "served"

    def test_same_state_is_idempotent(self, client, maid_headers, order_id):
        before = client.get(f"/api/orders/{order_id}").json()["data"]

        for _ in range(2):
            response = client.patch(f"/api/orders/{order_id}", json={"state": "pending"}, headers=maid_headers)
            assert response.status_code == 200
            assert response.json()["message"] == "No changes applied."
            assert response.json()["data"]["updated_at"] == before["updated_at"]

        assert client.get(f"/api/orders/{order_id}").json()["data"] == before

    def test_invalid_state(self, client, maid_headers, order_id):
        response = client.patch(f"/api/orders/{order_id}", json={"state": "eaten"}, headers=maid_headers)
        assert response.status_code == 400
        assert "state" in response.json()["details"]["field_errors"]

    def test_database_failure_is_a_database_error(self, client, maid_headers, db_session, order_id):
        failure = OperationalError("UPDATE", {}, Exception("disk I/O error"))
        with patch.object(db_session, "commit", side_effect=failure):
            response = client.patch(f"/api/orders/{order_id}", json={"state": "served"}, headers=maid_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Database error during save."}
        assert client.get(f"/api/orders/{order_id}").json()["data"]["state"] == "pending"

    def test_unknown_order(self, client, maid_headers):
        response = client.patch("/api/orders/5", json={"state": "served"}, headers=maid_headers)
        assert response.status_code == 404

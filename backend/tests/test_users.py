"""
Tests for the user (seating record) endpoints.
"""

import pytest

from tests.conftest import new_id


def register(client, user_id, maid_id, seat_id=1, **extra):
    payload = {"seat_id": seat_id, "maid_id": maid_id, **extra}
    return client.post(f"/api/users/{user_id}", json=payload)


class TestUserRegister:
    """POST /api/users/{id} is an upsert."""

    def test_new_user(self, client, seed_maid):
        user_id = new_id()
        response = register(client, user_id, seed_maid.id, seat_id=7, status="first visit")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User registered successfully."
        data = body["data"]
        assert data["id"] == user_id
        assert data["name"] is None
        assert data["seat_id"] == 7
        assert data["maid_id"] == seed_maid.id
        assert data["status"] == "first visit"
        assert data["is_valid"] is True
        assert data["created_at"].endswith("+00:00")

    def test_re_registration_keeps_name_and_clears_instax_maid(self, client, seed_maid, seed_inactive_maid):
        user_id = new_id()
        register(client, user_id, seed_maid.id, seat_id=1)
        client.patch(
            f"/api/users/{user_id}",
            json={"name": "Hanako", "instax_maid_id": seed_maid.id, "is_valid": False, "status": "bye"},
        )

        response = register(client, user_id, seed_inactive_maid.id, seat_id=4)
        data = response.json()["data"]
        assert data["name"] == "Hanako"
        assert data["seat_id"] == 4
        assert data["maid_id"] == seed_inactive_maid.id
        assert data["instax_maid_id"] is None
        assert data["is_valid"] is True
        assert data["status"] == "bye"

    def test_unknown_maid_writes_nothing(self, client, seed_maid, maid_headers):
        user_id = new_id()
        response = register(client, user_id, new_id())

        assert response.status_code == 400
        assert response.json()["message"] == "maid_id does not reference an existing maid."
        assert client.get(f"/api/users/{user_id}").status_code == 404

    def test_malformed_maid_id(self, client):
        response = register(client, new_id(), "abc")
        assert response.status_code == 400
        assert response.json()["message"] == "maid_id must be a valid UUID."

    @pytest.mark.parametrize("payload", [{"seat_id": 0}, {"seat_id": "3"}, {"status": "   "}, {"status": "x" * 201}])
    def test_invalid_payload(self, client, seed_maid, payload):
        body = {"seat_id": 1, "maid_id": seed_maid.id, **payload}
        response = client.post(f"/api/users/{new_id()}", json=body)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body."

    def test_malformed_user_id(self, client, seed_maid):
        response = register(client, "abc", seed_maid.id)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user id."


class TestUserRead:
    """GET /api/users, /api/users/{id} and /api/users/seat/{seat_id}."""

    def test_get_user(self, client, seed_user):
        response = client.get(f"/api/users/{seed_user.id}")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Taro"

    def test_get_unknown_user(self, client):
        response = client.get(f"/api/users/{new_id()}")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found."

    def test_list_requires_staff_key(self, client):
        assert client.get("/api/users").status_code == 401

    def test_list_newest_update_first(self, client, maid_headers, seed_maid):
        first, second = new_id(), new_id()
        register(client, first, seed_maid.id, seat_id=1)
        register(client, second, seed_maid.id, seat_id=2)
        client.patch(f"/api/users/{first}", json={"name": "touched"})

        users = client.get("/api/users", headers=maid_headers).json()["data"]["users"]
        assert [u["id"] for u in users] == [first, second]

    def test_seat_lookup(self, client, maid_headers, seed_user):
        response = client.get("/api/users/seat/3", headers=maid_headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == seed_user.id

    def test_seat_lookup_picks_latest_valid_occupant(self, client, maid_headers, seed_maid, seed_user):
        newcomer = new_id()
        register(client, newcomer, seed_maid.id, seat_id=3)

        assert client.get("/api/users/seat/3", headers=maid_headers).json()["data"]["id"] == newcomer

        client.patch(f"/api/users/{newcomer}", json={"is_valid": False})
        assert client.get("/api/users/seat/3", headers=maid_headers).json()["data"]["id"] == seed_user.id

    def test_vacant_seat(self, client, maid_headers):
        response = client.get("/api/users/seat/9", headers=maid_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "No active user found for the specified seat."

    def test_invalid_seat(self, client, maid_headers):
        response = client.get("/api/users/seat/zero", headers=maid_headers)
        assert response.status_code == 400


class TestUserUpdate:
    """PATCH /api/users/{id}."""

    def test_partial_update(self, client, seed_user):
        response = client.patch(f"/api/users/{seed_user.id}", json={"name": " Jiro ", "seat_id": 5})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User updated successfully."
        assert body["data"]["name"] == "Jiro"
        assert body["data"]["seat_id"] == 5

    def test_no_op_keeps_updated_at(self, client, seed_user):
        before = client.get(f"/api/users/{seed_user.id}").json()["data"]
        response = client.patch(f"/api/users/{seed_user.id}", json={"name": "Taro", "seat_id": 3})

        assert response.json()["message"] == "No changes applied."
        assert response.json()["data"]["updated_at"] == before["updated_at"]

    def test_explicit_null_clears_maid(self, client, seed_user):
        response = client.patch(f"/api/users/{seed_user.id}", json={"maid_id": None})
        assert response.json()["data"]["maid_id"] is None

    def test_unknown_instax_maid(self, client, seed_user):
        response = client.patch(f"/api/users/{seed_user.id}", json={"instax_maid_id": new_id()})
        assert response.status_code == 400
        assert response.json()["message"] == "instax_maid_id does not reference an existing maid."

    @pytest.mark.parametrize("payload", [{}, {"name": None}, {"is_valid": None}, {"is_valid": "no"}])
    def test_invalid_payload(self, client, seed_user, payload):
        response = client.patch(f"/api/users/{seed_user.id}", json=payload)
        assert response.status_code == 400

    def test_missing_body(self, client, seed_user):
        response = client.patch(f"/api/users/{seed_user.id}")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body."

    def test_unknown_user(self, client):
        response = client.patch(f"/api/users/{new_id()}", json={"name": "x"})
        assert response.status_code == 404


class TestUserRelations:
    """GET /api/users/{id}/orders and /api/users/{id}/instax."""

    def test_orders_of_unknown_user(self, client):
        response = client.get(f"/api/users/{new_id()}/orders")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found."

    def test_orders_of_user(self, client, seed_user, seed_menu):
        client.post("/api/orders", json={"user_id": seed_user.id, "menu_id": seed_menu.id})
        orders = client.get(f"/api/users/{seed_user.id}/orders").json()["data"]["orders"]
        assert len(orders) == 1
        assert orders[0]["menu_id"] == seed_menu.id

    def test_instax_of_user(self, client, seed_user, seed_instax):
        response = client.get(f"/api/users/{seed_user.id}/instax")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == seed_instax.id

    def test_user_without_instax(self, client, seed_user):
        response = client.get(f"/api/users/{seed_user.id}/instax")
        assert response.status_code == 404
        assert response.json()["message"] == "Instax not found."

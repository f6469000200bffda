"""
Tests for the maid endpoints.
"""

from unittest.mock import patch

import pytest

from cafe_api.main import app
from cafe_api.models import Maid, User
from cafe_api.services.domain import MaidService
from cafe_api.services.patches import MaidPatch
from cafe_shared.config.settings import get_settings
from cafe_shared.infrastructure.storage import ImageUpload, StoredObject
from tests.conftest import CDN, PNG_BYTES, make_settings, multipart, new_id, png


class TestMaidListing:
    """GET /api/maids and GET /api/maids/{id}."""

    def test_list_is_public_and_ordered(self, client, seed_maid, seed_inactive_maid):
        response = client.get("/api/maids")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "OK"
        ids = [m["id"] for m in body["data"]]
        assert ids == sorted([seed_maid.id, seed_inactive_maid.id])

    @pytest.mark.parametrize("raw,expected", [("true", "Mimi"), ("1", "Mimi"), ("no", "Nana")])
    def test_is_active_filter(self, client, seed_maid, seed_inactive_maid, raw, expected):
        response = client.get(f"/api/maids?is_active={raw}")
        assert [m["name"] for m in response.json()["data"]] == [expected]

    def test_is_active_camel_case_alias(self, client, seed_maid, seed_inactive_maid):
        response = client.get("/api/maids?isActive=false")
        assert [m["name"] for m in response.json()["data"]] == ["Nana"]

    def test_invalid_is_active_value(self, client):
        response = client.get("/api/maids?is_active=maybe")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid is_active parameter. Use true/false."

    def test_default_active_setting_applies_without_query(self, client, seed_maid, seed_inactive_maid):
        """With maid_list_default_active=true an omitted filter lists active maids only."""
        app.dependency_overrides[get_settings] = lambda: make_settings(maid_list_default_active=True)

        response = client.get("/api/maids")
        assert [m["name"] for m in response.json()["data"]] == ["Mimi"]

        response = client.get("/api/maids?is_active=false")
        assert [m["name"] for m in response.json()["data"]] == ["Nana"]

    def test_no_default_lists_everyone(self, client, seed_maid, seed_inactive_maid):
        response = client.get("/api/maids")
        assert len(response.json()["data"]) == 2

    def test_pagination(self, client, db_session):
        for i in range(3):
            db_session.add(Maid(id=new_id(), name=f"m{i}"))
        db_session.commit()

        first = client.get("/api/maids?page=1&per_page=2").json()["data"]
        second = client.get("/api/maids?page=2&perPage=2").json()["data"]
        assert len(first) == 2
        assert len(second) == 1
        assert {m["id"] for m in first}.isdisjoint({m["id"] for m in second})

    @pytest.mark.parametrize("query", ["page=0", "per_page=0", "per_page=101", "page=abc"])
    def test_invalid_pagination(self, client, query):
        response = client.get(f"/api/maids?{query}")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid pagination parameters."

    def test_get_maid(self, client, seed_maid):
        response = client.get(f"/api/maids/{seed_maid.id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Mimi"
        assert data["is_active"] is True
        assert data["image_url"] is None

    def test_get_unknown_maid(self, client):
        response = client.get(f"/api/maids/{new_id()}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Maid not found."}

    def test_malformed_id_is_rejected_before_lookup(self, client, sql_statements):
        response = client.get("/api/maids/abc")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid maid id."
        assert sql_statements == []

    def test_well_formed_id_is_looked_up(self, client, sql_statements):
        assert client.get(f"/api/maids/{new_id()}").status_code == 404
        assert any("FROM maid" in s for s in sql_statements)


class TestMaidCreate:
    """POST /api/maids and POST /api/maids/{id}."""

    def test_requires_staff_key(self, client):
        response = client.post("/api/maids", json={"name": "Yui"})
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized: Missing or invalid x-api-key header."

    def test_create_with_generated_id(self, client, maid_headers):
        response = client.post("/api/maids", json={"name": "  Yui  "}, headers=maid_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Maid created successfully."
        assert body["data"]["name"] == "Yui"
        assert body["data"]["is_active"] is False
        assert body["data"]["is_instax_available"] is False
        assert len(body["data"]["id"]) == 36

    def test_create_requires_name(self, client, maid_headers):
        response = client.post("/api/maids", json={"is_instax_available": True}, headers=maid_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Name is required."

    def test_reserve_id_without_body(self, client, maid_headers):
        maid_id = new_id()
        response = client.post(f"/api/maids/{maid_id}", headers=maid_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == maid_id
        assert data["name"] == ""

    def test_reserve_id_uppercase_is_canonicalised(self, client, maid_headers):
        maid_id = new_id()
        response = client.post(f"/api/maids/{maid_id.upper()}", json={"name": "Rin"}, headers=maid_headers)
        assert response.json()["data"]["id"] == maid_id

    def test_reserve_taken_id_conflicts(self, client, maid_headers, seed_maid):
        response = client.post(f"/api/maids/{seed_maid.id}", json={"name": "Dup"}, headers=maid_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Maid id already exists."

    def test_non_boolean_flag_is_rejected(self, client, maid_headers):
        response = client.post("/api/maids", json={"name": "Yui", "is_instax_available": "yes"}, headers=maid_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid request body."
        assert "is_instax_available" in body["details"]["field_errors"]


class TestMaidUpdate:
    """PATCH /api/maids/{id} with JSON and multipart bodies."""

    def test_json_update(self, client, maid_headers, seed_maid):
        response = client.patch(
            f"/api/maids/{seed_maid.id}",
            json={"name": "Mimi-chan", "is_instax_available": False},
            headers=maid_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Maid updated successfully."
        assert body["data"]["name"] == "Mimi-chan"
        assert body["data"]["is_instax_available"] is False

    def test_same_values_are_a_no_op(self, client, maid_headers, seed_maid):
        before = client.get(f"/api/maids/{seed_maid.id}").json()["data"]
        response = client.patch(
            f"/api/maids/{seed_maid.id}",
            json={"name": "Mimi", "is_instax_available": True},
            headers=maid_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "No changes applied."
        assert response.json()["data"] == before

    def test_empty_json_body_is_rejected(self, client, maid_headers, seed_maid):
        response = client.patch(f"/api/maids/{seed_maid.id}", json={}, headers=maid_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body."

    def test_multipart_image_upload(self, client, maid_headers, seed_maid, store):
        response = client.patch(
            f"/api/maids/{seed_maid.id}",
            files=multipart({"name": "Mimi"}, image=png("portrait.png")),
            headers=maid_headers,
        )
        assert response.status_code == 200
        image_url = response.json()["data"]["image_url"]
        assert image_url.startswith(f"{CDN}/maids/{seed_maid.id}/")
        assert image_url.endswith("-portrait.png")
        assert store.keys() == [image_url[len(CDN) + 1:]]

    def test_replacing_image_removes_previous_blob(self, client, maid_headers, seed_maid, store):
        first = client.patch(
            f"/api/maids/{seed_maid.id}", files=multipart(image=png("a.png")), headers=maid_headers
        ).json()["data"]["image_url"]
        second = client.patch(
            f"/api/maids/{seed_maid.id}", files=multipart(image=png("b.png")), headers=maid_headers
        ).json()["data"]["image_url"]

        assert first != second
        assert store.keys() == [second[len(CDN) + 1:]]

    def test_multipart_flag_strings(self, client, maid_headers, seed_maid):
        response = client.patch(
            f"/api/maids/{seed_maid.id}",
            files=multipart({"is_instax_available": "off"}),
            headers=maid_headers,
        )
        assert response.json()["data"]["is_instax_available"] is False

    def test_multipart_without_fields(self, client, maid_headers, seed_maid):
        response = client.patch(
            f"/api/maids/{seed_maid.id}", files=multipart({"name": "   "}), headers=maid_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "No updatable fields provided."

    def test_non_image_upload_is_rejected(self, client, maid_headers, seed_maid, store):
        response = client.patch(
            f"/api/maids/{seed_maid.id}",
            files=multipart(image=("notes.txt", b"hello", "text/plain")),
            headers=maid_headers,
        )
        assert response.status_code == 400
        assert len(store) == 0

    def test_update_unknown_maid(self, client, maid_headers):
        response = client.patch(f"/api/maids/{new_id()}", json={"name": "x"}, headers=maid_headers)
        assert response.status_code == 404

    def test_set_active(self, client, maid_headers, seed_inactive_maid):
        response = client.patch(
            f"/api/maids/{seed_inactive_maid.id}/active", json={"is_active": True}, headers=maid_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Maid active flag updated."
        assert response.json()["data"]["is_active"] is True

    def test_set_active_requires_boolean(self, client, maid_headers, seed_maid):
        response = client.patch(f"/api/maids/{seed_maid.id}/active", json={"is_active": "true"}, headers=maid_headers)
        assert response.status_code == 400


class TestMaidPortraitRollback:
    """A failed portrait swap keeps the previous portrait and removes the new blob."""

    @pytest.mark.asyncio
    async def test_failed_save_keeps_previous_portrait(self, db_session, store, seed_maid):
        old_key = f"maids/{seed_maid.id}/first.png"
        store._objects[old_key] = StoredObject(key=old_key, data=PNG_BYTES, content_type="image/png")
        seed_maid.image_key = old_key
        db_session.commit()

        service = MaidService(db_session, store, CDN)
        image = ImageUpload(filename="second.png", content_type="image/png", data=PNG_BYTES)

        with patch.object(MaidService, "_apply", side_effect=RuntimeError("save failed")):
            with pytest.raises(RuntimeError, match="save failed"):
                await service.update(seed_maid.id, MaidPatch(name="Momo", image=image))

        assert store.keys() == [old_key]
        db_session.refresh(seed_maid)
        assert seed_maid.image_key == old_key
        assert seed_maid.name == "Mimi"


class TestMaidDelete:
    """DELETE /api/maids/{id}."""

    def test_delete_nulls_user_references(self, client, maid_headers, seed_maid, seed_user, db_session):
        seed_user.instax_maid_id = seed_maid.id
        db_session.commit()

        response = client.delete(f"/api/maids/{seed_maid.id}", headers=maid_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Maid deleted successfully."
        assert response.json()["data"]["id"] == seed_maid.id

        user = db_session.get(User, seed_user.id)
        assert user is not None
        assert user.maid_id is None
        assert user.instax_maid_id is None
        assert client.get(f"/api/maids/{seed_maid.id}").status_code == 404

    def test_delete_removes_portrait(self, client, maid_headers, seed_maid, store):
        client.patch(f"/api/maids/{seed_maid.id}", files=multipart(image=png()), headers=maid_headers)
        assert len(store) == 1

        client.delete(f"/api/maids/{seed_maid.id}", headers=maid_headers)
        assert len(store) == 0


class TestAssignedUsers:
    """GET /api/maids/{id}/users."""

    def _seat(self, client, maid_id, seat_id, status=None):
        user_id = new_id()
        payload = {"seat_id": seat_id, "maid_id": maid_id}
        if status:
            payload["status"] = status
        client.post(f"/api/users/{user_id}", json=payload)
        return user_id

    def test_engagement_filter(self, client, maid_headers, seed_maid):
        serving = self._seat(client, seed_maid.id, 1, "happy")
        leaving = self._seat(client, seed_maid.id, 2, "  Leaving ")

        everyone = client.get(f"/api/maids/{seed_maid.id}/users", headers=maid_headers).json()["data"]
        states = {u["id"]: u["engagement_state"] for u in everyone}
        assert states == {serving: "serving", leaving: "leaving"}

        only_leaving = client.get(
            f"/api/maids/{seed_maid.id}/users?status=leaving", headers=maid_headers
        ).json()["data"]
        assert [u["id"] for u in only_leaving] == [leaving]

    def test_invalid_users_are_excluded(self, client, maid_headers, seed_maid):
        user_id = self._seat(client, seed_maid.id, 1)
        client.patch(f"/api/users/{user_id}", json={"is_valid": False})

        response = client.get(f"/api/maids/{seed_maid.id}/users", headers=maid_headers)
        assert response.json()["data"] == []

    def test_latest_instax_id(self, client, maid_headers, seed_maid, seed_instax):
        data = client.get(f"/api/maids/{seed_maid.id}/users", headers=maid_headers).json()["data"]
        assert data[0]["latest_instax_id"] == seed_instax.id

    def test_invalid_status_filter(self, client, maid_headers, seed_maid):
        response = client.get(f"/api/maids/{seed_maid.id}/users?status=gone", headers=maid_headers)
        assert response.status_code == 400

    def test_requires_staff_key(self, client, seed_maid):
        assert client.get(f"/api/maids/{seed_maid.id}/users").status_code == 401

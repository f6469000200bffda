"""
Tests for instax capture, replacement and history.
"""

from unittest.mock import patch

import pytest

from cafe_api.models import Instax, InstaxHistory
from cafe_api.services.domain import InstaxService
from cafe_shared.infrastructure.storage import ImageUpload
from tests.conftest import CDN, PNG_BYTES, multipart, new_id, png


def key_of(url: str) -> str:
    return url[len(CDN) + 1:]


class TestInstaxCreate:
    """POST /api/instax and POST /api/instax/by-seat."""

    def test_create(self, client, maid_headers, seed_user, seed_maid, store):
        response = client.post(
            "/api/instax",
            files=multipart({"user_id": seed_user.id, "maid_id": seed_maid.id}, instax=png("snap.png")),
            headers=maid_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Instax created successfully."
        data = body["data"]
        assert data["user_id"] == seed_user.id
        assert data["maid_id"] == seed_maid.id
        assert data["image_url"].startswith(f"{CDN}/instax/{seed_user.id}/")
        assert store.keys() == [key_of(data["image_url"])]

    def test_requires_staff_key(self, client, seed_user, seed_maid):
        response = client.post(
            "/api/instax",
            files=multipart({"user_id": seed_user.id, "maid_id": seed_maid.id}, instax=png()),
        )
        assert response.status_code == 401

    def test_missing_file(self, client, maid_headers, seed_user, seed_maid):
        response = client.post(
            "/api/instax",
            files=multipart({"user_id": seed_user.id, "maid_id": seed_maid.id}),
            headers=maid_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "instax file is required."

    @pytest.mark.parametrize(
        "fields,message",
        [
            ({"maid_id": "m"}, "user_id must be provided."),
            ({"user_id": new_id()}, "maid_id must be provided."),
            ({"user_id": "abc", "maid_id": "abc"}, "user_id must be a valid UUID."),
        ],
    )
    def test_invalid_fields(self, client, maid_headers, fields, message):
        response = client.post("/api/instax", files=multipart(fields, instax=png()), headers=maid_headers)
        assert response.status_code == 400
        assert response.json()["message"] == message

    def test_unknown_maid_uploads_nothing(self, client, maid_headers, seed_user, store, db_session):
        response = client.post(
            "/api/instax",
            files=multipart({"user_id": seed_user.id, "maid_id": new_id()}, instax=png()),
            headers=maid_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "maid_id does not reference an existing maid."
        assert len(store) == 0
        assert db_session.query(Instax).count() == 0

    def test_requires_multipart(self, client, maid_headers):
        response = client.post("/api/instax", json={"user_id": "x"}, headers=maid_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Content-Type must be multipart/form-data."

    def test_create_by_seat(self, client, maid_headers, seed_user, seed_maid):
        response = client.post(
            "/api/instax/by-seat",
            files=multipart({"seat_id": "3", "maid_id": seed_maid.id}, instax=png()),
            headers=maid_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["user_id"] == seed_user.id

    def test_by_seat_vacant(self, client, maid_headers, seed_maid, store):
        response = client.post(
            "/api/instax/by-seat",
            files=multipart({"seat_id": "8", "maid_id": seed_maid.id}, instax=png()),
            headers=maid_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "No active user found for the specified seat."
        assert len(store) == 0

    def test_by_seat_invalid_seat(self, client, maid_headers, seed_maid):
        response = client.post(
            "/api/instax/by-seat",
            files=multipart({"seat_id": "three", "maid_id": seed_maid.id}, instax=png()),
            headers=maid_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "seat_id must be a valid positive integer."


class TestInstaxRead:
    """GET /api/instax/{id}."""

    def test_get(self, client, maid_headers, seed_instax):
        response = client.get(f"/api/instax/{seed_instax.id}", headers=maid_headers)
        assert response.status_code == 200
        assert response.json()["data"]["image_url"] == f"{CDN}/{seed_instax.image_key}"

    def test_get_unknown(self, client, maid_headers):
        response = client.get("/api/instax/99", headers=maid_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Instax not found."

    def test_latest_per_user(self, client, seed_user, seed_maid, seed_instax, db_session):
        newer = Instax(user_id=seed_user.id, maid_id=seed_maid.id, image_key="instax/x/newer.png")
        db_session.add(newer)
        db_session.commit()

        response = client.get(f"/api/users/{seed_user.id}/instax")
        assert response.json()["data"]["id"] == newer.id


class TestInstaxHistoryFlow:
    """Replacing a photo archives the previous one; admins review and purge the archive."""

    def test_replace_archive_and_purge(self, client, maid_headers, admin_headers, seed_user, seed_instax, store):
        old_key = seed_instax.image_key

        response = client.patch(
            "/api/instax",
            files=multipart({"instax_id": seed_instax.id}, instax=png("retake.png")),
            headers=maid_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Instax updated successfully."
        new_key = key_of(response.json()["data"]["image_url"])
        assert new_key != old_key
        assert sorted(store.keys()) == sorted([old_key, new_key])

        history = client.get(f"/api/admin/users/{seed_user.id}/instax-history", headers=admin_headers)
        assert history.status_code == 200
        items = history.json()["data"]
        assert len(items) == 1
        item = items[0]
        assert item["instax_id"] == seed_instax.id
        assert item["image_url"] == f"{CDN}/{old_key}"
        assert item["user_id"] == seed_user.id
        assert item["maid_id"] == seed_instax.maid_id

        deleted = client.delete(f"/api/admin/instax/history/{item['id']}", headers=admin_headers)
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Instax history deleted successfully."
        assert deleted.json()["data"]["id"] == item["id"]
        assert store.keys() == [new_key]

        again = client.get(f"/api/admin/users/{seed_user.id}/instax-history", headers=admin_headers)
        assert again.json()["data"] == []

    def test_update_without_previous_image_archives_nothing(self, client, maid_headers, seed_user, seed_maid, db_session):
        blank = Instax(user_id=seed_user.id, maid_id=seed_maid.id, image_key=None)
        db_session.add(blank)
        db_session.commit()

        response = client.patch(
            "/api/instax", files=multipart({"instax_id": blank.id}, instax=png()), headers=maid_headers
        )
        assert response.status_code == 200
        assert db_session.query(InstaxHistory).count() == 0

    def test_update_unknown_instax(self, client, maid_headers, store):
        response = client.patch("/api/instax", files=multipart({"instax_id": "12"}, instax=png()), headers=maid_headers)
        assert response.status_code == 404
        assert len(store) == 0

    def test_update_requires_instax_id(self, client, maid_headers):
        response = client.patch("/api/instax", files=multipart(instax=png()), headers=maid_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "instax_id must be provided."

    def test_history_requires_admin(self, client, maid_headers, seed_user):
        response = client.get(f"/api/admin/users/{seed_user.id}/instax-history", headers=maid_headers)
        assert response.status_code == 401

    def test_delete_unknown_history(self, client, admin_headers):
        response = client.delete("/api/admin/instax/history/3", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Instax history not found."


class TestInstaxReplaceRollback:
    """A failed replacement leaves the record, the archive and the store as they were."""

    @pytest.mark.asyncio
    async def test_failed_swap_undoes_upload_and_archive(self, db_session, store, seed_instax):
        old_key = seed_instax.image_key
        service = InstaxService(db_session, store, CDN)
        image = ImageUpload(filename="retake.png", content_type="image/png", data=PNG_BYTES)

        with patch.object(InstaxService, "_swap", side_effect=RuntimeError("swap failed")):
            with pytest.raises(RuntimeError, match="swap failed"):
                await service.update(seed_instax.id, image)

        assert store.keys() == [old_key]
        assert db_session.query(InstaxHistory).count() == 0
        db_session.refresh(seed_instax)
        assert seed_instax.image_key == old_key

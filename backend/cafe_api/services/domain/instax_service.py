"""
Instax Domain Service.

An instax replaced by a new photo keeps the previous image in
InstaxHistory instead of deleting it. Creation and replacement are sagas
so a failed step never leaves an orphaned blob or a dangling archive row.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from cafe_api.models import Instax, InstaxHistory, utcnow
from cafe_api.repositories import InstaxHistoryRepository, InstaxRepository, UserRepository
from cafe_api.services.base import LifecycleService
from cafe_api.services.references import ReferenceValidator
from cafe_api.services.saga import Saga
from cafe_shared.config.constants import StoragePrefix
from cafe_shared.config.logging import get_logger
from cafe_shared.infrastructure.storage import ImageUpload, ObjectStore, delete_quietly
from cafe_shared.utils.exceptions import NotFoundError, SeatVacantError
from cafe_shared.utils.identifiers import EntityId
from cafe_shared.utils.schemas import InstaxHistoryOutput, InstaxOutput

logger = get_logger(__name__)


class InstaxService(LifecycleService):
    """Domain service for Instax and InstaxHistory operations."""

    entity_name = "Instax"

    def __init__(self, db: Session, store: Optional[ObjectStore] = None, public_base_url: str = ""):
        super().__init__(db, store, public_base_url)
        self._repo = InstaxRepository(db)
        self._history = InstaxHistoryRepository(db)
        self._users = UserRepository(db)
        self._references = ReferenceValidator(db)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get(self, instax_id: int) -> InstaxOutput:
        return self.mapper.instax(self._require(self._repo, instax_id))

    def get_by_user(self, user_id: EntityId) -> InstaxOutput:
        """Most recent instax of a user."""
        instax = self._repo.find_latest_by_user(user_id)
        if instax is None:
            raise NotFoundError("Instax", user_id=str(user_id))
        return self.mapper.instax(instax)

    def list_history_for_user(self, user_id: EntityId) -> list[InstaxHistoryOutput]:
        rows = self._history.find_by_user(user_id)
        return [self.mapper.instax_history(history, instax) for history, instax in rows]

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def create(self, user_id: EntityId, maid_id: EntityId, image: ImageUpload) -> InstaxOutput:
        """
        Store the photo under the user's prefix and insert the record.

        Raises:
            InvalidReferenceError: Unknown user or maid; nothing is uploaded.
        """
        self._references.require_user(user_id)
        self._references.require_maid(maid_id)

        saga = Saga("instax.create", user_id=str(user_id), maid_id=str(maid_id))
        saga.step(
            "key",
            lambda _: self._new_key(f"{StoragePrefix.INSTAX}/{user_id}", image),
            compensate=self.store.delete,
        )
        saga.step("upload", lambda r: self._put_image(r["key"], image))
        saga.step(
            "insert",
            lambda r: self._repo.save(Instax(user_id=user_id, maid_id=maid_id, image_key=r["key"])),
        )
        instax = (await saga.run())["insert"]

        logger.info("Instax created", instax_id=instax.id, user_id=str(user_id), maid_id=str(maid_id))
        return self.mapper.instax(instax)

    async def create_by_seat(self, seat_id: int, maid_id: EntityId, image: ImageUpload) -> InstaxOutput:
        """Same as ``create`` for the current occupant of ``seat_id``."""
        user = self._users.find_current_by_seat(seat_id)
        if user is None:
            raise SeatVacantError(seat_id)
        return await self.create(user.id, maid_id, image)

    async def update(self, instax_id: int, image: ImageUpload) -> InstaxOutput:
        """
        Replace the photo.

        Steps: store the new blob, archive the previous key (if any) into
        history, point the record at the new key. A failure undoes the
        archive row and the new blob; the previous image stays in place.
        """
        instax = self._require(self._repo, instax_id)
        previous_key = instax.image_key

        saga = Saga("instax.update", instax_id=instax.id)
        saga.step(
            "key",
            lambda _: self._new_key(f"{StoragePrefix.INSTAX}/{instax.user_id}", image),
            compensate=self.store.delete,
        )
        saga.step("upload", lambda r: self._put_image(r["key"], image))
        if previous_key:
            saga.step(
                "archive",
                lambda _: self._history.save(
                    InstaxHistory(instax_id=instax.id, image_key=previous_key, archived_at=utcnow())
                ),
                compensate=self._history.delete,
            )
        saga.step("swap", lambda r: self._swap(instax, r["key"]))
        instax = (await saga.run())["swap"]

        logger.info("Instax updated", instax_id=instax.id, archived=bool(previous_key))
        return self.mapper.instax(instax)

    async def delete_history(self, history_id: int) -> InstaxHistoryOutput:
        """Delete an archive row, then its blob."""
        found = self._history.find_with_owner(history_id)
        if found is None:
            raise NotFoundError("Instax history", history_id=history_id)

        history, instax = found
        output = self.mapper.instax_history(history, instax)
        image_key = history.image_key

        self._history.delete(history)
        logger.info("Instax history deleted", history_id=history_id, instax_id=output.instax_id)

        await delete_quietly(self.store, image_key, history_id=history_id)
        return output

    def _swap(self, instax: Instax, key: str) -> Instax:
        instax.image_key = key
        return self._repo.save(instax)

"""
Maid Domain Service.

Lifecycle of staff records: listing, creation with a reserved or generated
id, partial updates with portrait replacement, the visibility flag,
deletion with blob cleanup and the assigned-users view.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cafe_api.models import Maid
from cafe_api.repositories import InstaxRepository, MaidFilters, MaidRepository, UserRepository
from cafe_api.services.base import LifecycleService, Mutation
from cafe_api.services.patches import MaidPatch, is_set
from cafe_api.services.saga import Saga
from cafe_shared.config.constants import EngagementFilter, Limits, StoragePrefix
from cafe_shared.config.logging import get_logger
from cafe_shared.infrastructure.storage import ImageUpload, ObjectStore, delete_quietly
from cafe_shared.utils.exceptions import ConflictError, ValidationError
from cafe_shared.utils.identifiers import EntityId, IdentifierStrategy, get_identifier_strategy
from cafe_shared.utils.schemas import AssignedUserOutput, MaidOutput

logger = get_logger(__name__)


class MaidService(LifecycleService):
    """
    Domain service for Maid operations.

    ``default_active`` is the is_active filter applied by ``list`` when the
    caller does not pass one; None lists every maid.
    """

    entity_name = "Maid"

    def __init__(
        self,
        db: Session,
        store: Optional[ObjectStore] = None,
        public_base_url: str = "",
        *,
        default_active: Optional[bool] = None,
        ids: Optional[IdentifierStrategy] = None,
    ):
        super().__init__(db, store, public_base_url)
        self._repo = MaidRepository(db)
        self._users = UserRepository(db)
        self._instax = InstaxRepository(db)
        self._default_active = default_active
        self._ids = ids or get_identifier_strategy()

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list(
        self,
        page: int = 1,
        per_page: int = Limits.DEFAULT_PAGE_SIZE,
        is_active: Optional[bool] = None,
    ) -> list[MaidOutput]:
        """
        Page of maids ordered by id.

        Raises:
            ValidationError: page < 1 or per_page outside 1..100.
        """
        if page < 1 or per_page < 1 or per_page > Limits.MAX_PAGE_SIZE:
            raise ValidationError("Invalid pagination parameters.", page=page, per_page=per_page)

        active = is_active if is_active is not None else self._default_active
        maids = self._repo.find_all(
            MaidFilters(limit=per_page, offset=(page - 1) * per_page, is_active=active)
        )
        return [self.mapper.maid(m) for m in maids]

    def get(self, maid_id: EntityId) -> MaidOutput:
        return self.mapper.maid(self._require(self._repo, maid_id))

    def list_assigned_users(
        self,
        maid_id: EntityId,
        status: str = EngagementFilter.BOTH,
    ) -> list[AssignedUserOutput]:
        """
        Valid users seated with this maid, with their engagement state and
        most recent instax id.
        """
        if status not in EngagementFilter.ALL:
            raise ValidationError("Invalid status parameter. Use serving, leaving or both.", status=status)

        self._require(self._repo, maid_id)
        users = self._users.find_valid_by_maid(maid_id)
        latest = self._instax.latest_ids_by_user(u.id for u in users)

        outputs = [self.mapper.assigned_user(u, latest.get(u.id)) for u in users]
        if status == EngagementFilter.BOTH:
            return outputs
        return [o for o in outputs if o.engagement_state == status]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(
        self,
        name: Optional[str] = None,
        is_instax_available: Optional[bool] = None,
        maid_id: Optional[EntityId] = None,
    ) -> MaidOutput:
        """
        Create a maid.

        With ``maid_id`` the caller reserves the id and the name may be
        omitted; otherwise the id is generated and a name is required.

        Raises:
            ConflictError: The reserved id is taken.
            ValidationError: Generated id and no name.
        """
        clean_name = (name or "").strip()

        if maid_id is None:
            if not clean_name:
                raise ValidationError("Name is required.")
            maid_id = self._ids.generate()
        elif self._repo.exists(maid_id):
            raise ConflictError("Maid id already exists.", maid_id=str(maid_id))

        maid = Maid(
            id=maid_id,
            name=clean_name,
            is_active=False,
            is_instax_available=bool(is_instax_available),
        )
        try:
            maid = self._repo.save(maid)
        except IntegrityError:
            raise ConflictError("Maid id already exists.", maid_id=str(maid_id)) from None

        logger.info("Maid created", maid_id=str(maid.id))
        return self.mapper.maid(maid)

    async def update(self, maid_id: EntityId, patch: MaidPatch) -> Mutation[MaidOutput]:
        """
        Apply a partial update.

        A new portrait is stored first, then the record is switched to it,
        then the previous blob is removed. Fields equal to the stored value
        do not count as changes; with no change the record is untouched.
        """
        maid = self._require(self._repo, maid_id)

        changes: dict[str, Any] = {}
        if is_set(patch.name) and patch.name is not None:
            name = patch.name.strip()
            if name and name != maid.name:
                changes["name"] = name
        if is_set(patch.is_instax_available) and patch.is_instax_available is not None:
            flag = bool(patch.is_instax_available)
            if flag != bool(maid.is_instax_available):
                changes["is_instax_available"] = flag
        image: Optional[ImageUpload] = patch.image if is_set(patch.image) else None

        if not changes and image is None:
            return Mutation(self.mapper.maid(maid), changed=False)

        if image is None:
            self._apply(maid, changes)
        else:
            previous_key = maid.image_key
            prefix = f"{StoragePrefix.MAIDS}/{maid.id}"

            saga = Saga("maid.update", maid_id=str(maid.id))
            saga.step("key", lambda _: self._new_key(prefix, image), compensate=self.store.delete)
            saga.step("upload", lambda r: self._put_image(r["key"], image))
            saga.step("save", lambda r: self._apply(maid, {**changes, "image_key": r["key"]}))
            await saga.run()

            await delete_quietly(self.store, previous_key, maid_id=str(maid.id))

        logger.info("Maid updated", maid_id=str(maid.id), fields=sorted(changes) + (["image"] if image else []))
        return Mutation(self.mapper.maid(maid))

    def set_active(self, maid_id: EntityId, is_active: bool) -> MaidOutput:
        maid = self._require(self._repo, maid_id)
        maid = self._apply(maid, {"is_active": bool(is_active)})
        logger.info("Maid active flag updated", maid_id=str(maid.id), is_active=maid.is_active)
        return self.mapper.maid(maid)

    async def delete(self, maid_id: EntityId) -> MaidOutput:
        """
        Delete the record, then its portrait.

        Users pointing at the maid keep their rows with the references
        nulled by the database. A failed blob delete is logged only.
        """
        maid = self._require(self._repo, maid_id)
        output = self.mapper.maid(maid)
        image_key = maid.image_key

        self._repo.delete(maid)
        logger.info("Maid deleted", maid_id=str(output.id))

        await delete_quietly(self.store, image_key, maid_id=str(output.id))
        return output

    def _apply(self, maid: Maid, changes: dict[str, Any]) -> Maid:
        for field, value in changes.items():
            setattr(maid, field, value)
        return self._repo.save(maid)

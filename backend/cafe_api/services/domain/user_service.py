"""
User Domain Service.

Users are seating records keyed by an id the client already holds.
Registration is an upsert: a returning id is re-seated instead of failing.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Session

from cafe_api.models import User
from cafe_api.repositories import UserRepository
from cafe_api.services.base import LifecycleService, Mutation
from cafe_api.services.patches import UserPatch, is_set
from cafe_api.services.references import ReferenceValidator
from cafe_shared.config.constants import Limits
from cafe_shared.config.logging import get_logger
from cafe_shared.utils.exceptions import SeatVacantError, ValidationError
from cafe_shared.utils.identifiers import EntityId
from cafe_shared.utils.schemas import UserOutput

logger = get_logger(__name__)


def clean_status(value: Optional[str]) -> Optional[str]:
    """
    Trim a status text.

    Raises:
        ValidationError: Blank after trimming or longer than 200 characters.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValidationError("status must not be empty when provided.")
    if len(value) > Limits.MAX_STATUS_LENGTH:
        raise ValidationError(f"status must be at most {Limits.MAX_STATUS_LENGTH} characters.")
    return value


class UserService(LifecycleService):
    """Domain service for User operations."""

    entity_name = "User"

    def __init__(self, db: Session, public_base_url: str = ""):
        super().__init__(db, None, public_base_url)
        self._repo = UserRepository(db)
        self._references = ReferenceValidator(db)

    def list(self) -> list[UserOutput]:
        """Every user, most recently updated first."""
        return [self.mapper.user(u) for u in self._repo.find_all()]

    def get(self, user_id: EntityId) -> UserOutput:
        return self.mapper.user(self._require(self._repo, user_id))

    def get_by_seat(self, seat_id: int) -> UserOutput:
        """Current occupant of ``seat_id``."""
        user = self._repo.find_current_by_seat(seat_id)
        if user is None:
            raise SeatVacantError(seat_id)
        return self.mapper.user(user)

    def register(
        self,
        user_id: EntityId,
        seat_id: int,
        maid_id: EntityId,
        status: Optional[str] = None,
    ) -> UserOutput:
        """
        Seat a user with a maid (upsert).

        A known id keeps its name, gets the new seat and maid, loses its
        instax maid and becomes valid again. A new id starts with an empty
        name. The status is only written when provided.

        Raises:
            InvalidReferenceError: maid_id does not exist. Nothing is written.
        """
        self._references.require_maid(maid_id, "maid_id")
        status = clean_status(status)

        user = self._repo.find_by_id(user_id)
        if user is None:
            user = User(id=user_id, name="", seat_id=seat_id, maid_id=maid_id, is_valid=True, status=status)
            created = True
        else:
            user.seat_id = seat_id
            user.maid_id = maid_id
            user.instax_maid_id = None
            user.is_valid = True
            if status is not None:
                user.status = status
            user.touch()
            created = False

        user = self._repo.save(user)
        logger.info("User registered", user_id=str(user.id), seat_id=seat_id, maid_id=str(maid_id), new=created)
        return self.mapper.user(user)

    def update(self, user_id: EntityId, patch: UserPatch) -> Mutation[UserOutput]:
        """
        Partial update. Maid references are checked before anything is
        written; updated_at moves only when a value actually changes.
        """
        user = self._require(self._repo, user_id)

        if is_set(patch.maid_id):
            self._references.require_maid(patch.maid_id, "maid_id")
        if is_set(patch.instax_maid_id):
            self._references.require_maid(patch.instax_maid_id, "instax_maid_id")

        candidate: dict[str, Any] = {}
        if is_set(patch.name) and patch.name is not None:
            candidate["name"] = patch.name.strip()
        if is_set(patch.status):
            candidate["status"] = clean_status(patch.status)
        for field in ("maid_id", "instax_maid_id", "seat_id"):
            value = getattr(patch, field)
            if is_set(value):
                candidate[field] = value
        if is_set(patch.is_valid) and patch.is_valid is not None:
            candidate["is_valid"] = bool(patch.is_valid)

        changes = {k: v for k, v in candidate.items() if getattr(user, k) != v}
        if not changes:
            return Mutation(self.mapper.user(user), changed=False)

        for field, value in changes.items():
            setattr(user, field, value)
        user.touch()
        user = self._repo.save(user)

        logger.info("User updated", user_id=str(user.id), fields=sorted(changes))
        return Mutation(self.mapper.user(user))

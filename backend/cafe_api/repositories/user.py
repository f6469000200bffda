"""
User Repository - Data access for seating records.
"""

from typing import Any, Sequence

from sqlalchemy import Select, select

from cafe_api.models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entities, most recently updated first."""

    @property
    def model(self) -> type[User]:
        return User

    def _base_query(self) -> Select:
        return select(User).order_by(User.updated_at.desc())

    def find_current_by_seat(self, seat_id: int) -> User | None:
        """
        Current occupant of a seat.

        Seat ids are not unique; the occupant is the valid row with the most
        recent updated_at.
        """
        query = (
            select(User)
            .where(User.seat_id == seat_id, User.is_valid.is_(True))
            .order_by(User.updated_at.desc())
            .limit(1)
        )
        return self._db.scalar(query)

    def find_valid_by_maid(self, maid_id: Any) -> Sequence[User]:
        """Valid users assigned to ``maid_id``."""
        query = (
            select(User)
            .where(User.maid_id == maid_id, User.is_valid.is_(True))
            .order_by(User.updated_at.desc())
        )
        return self._db.execute(query).scalars().all()

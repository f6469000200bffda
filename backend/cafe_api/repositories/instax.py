"""
Instax Repositories - Data access for instax photos and their archive.
"""

from typing import Any, Iterable, Sequence

from sqlalchemy import Select, func, select

from cafe_api.models import Instax, InstaxHistory
from .base import BaseRepository


class InstaxRepository(BaseRepository[Instax]):
    """Repository for Instax entities, newest first."""

    @property
    def model(self) -> type[Instax]:
        return Instax

    def _base_query(self) -> Select:
        return select(Instax).order_by(Instax.created_at.desc(), Instax.id.desc())

    def find_latest_by_user(self, user_id: Any) -> Instax | None:
        query = (
            select(Instax)
            .where(Instax.user_id == user_id)
            .order_by(Instax.created_at.desc(), Instax.id.desc())
            .limit(1)
        )
        return self._db.scalar(query)

    def latest_ids_by_user(self, user_ids: Iterable[Any]) -> dict[Any, int]:
        """
        Map each user id to the id of its most recent instax.

        Users without any instax are absent from the result.
        """
        user_ids = list(user_ids)
        if not user_ids:
            return {}

        latest = (
            select(Instax.user_id, func.max(Instax.created_at).label("created_at"))
            .where(Instax.user_id.in_(user_ids))
            .group_by(Instax.user_id)
            .subquery()
        )
        query = (
            select(Instax.user_id, Instax.id)
            .join(
                latest,
                (Instax.user_id == latest.c.user_id) & (Instax.created_at == latest.c.created_at),
            )
            .order_by(Instax.id)
        )
        result: dict[Any, int] = {}
        # Later ids win when two photos share a timestamp
        for user_id, instax_id in self._db.execute(query):
            result[user_id] = instax_id
        return result


class InstaxHistoryRepository(BaseRepository[InstaxHistory]):
    """Repository for archived instax images."""

    @property
    def model(self) -> type[InstaxHistory]:
        return InstaxHistory

    def _base_query(self) -> Select:
        return select(InstaxHistory).order_by(InstaxHistory.archived_at.desc(), InstaxHistory.id.desc())

    def find_with_owner(self, history_id: int) -> tuple[InstaxHistory, Instax] | None:
        """History row together with the instax it belongs to."""
        query = (
            select(InstaxHistory, Instax)
            .join(Instax, InstaxHistory.instax_id == Instax.id)
            .where(InstaxHistory.id == history_id)
        )
        row = self._db.execute(query).first()
        return (row[0], row[1]) if row else None

    def find_by_user(self, user_id: Any) -> Sequence[tuple[InstaxHistory, Instax]]:
        """Archived images of every instax owned by ``user_id``, newest first."""
        query = (
            select(InstaxHistory, Instax)
            .join(Instax, InstaxHistory.instax_id == Instax.id)
            .where(Instax.user_id == user_id)
            .order_by(InstaxHistory.archived_at.desc(), InstaxHistory.id.desc())
        )
        return [(history, instax) for history, instax in self._db.execute(query).all()]

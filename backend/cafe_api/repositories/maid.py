"""
Maid Repository - Data access for maids.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select

from cafe_api.models import Maid
from .base import BaseRepository, RepositoryFilters


@dataclass
class MaidFilters(RepositoryFilters):
    """Filters specific to maids. ``is_active=None`` returns every maid."""

    is_active: bool | None = None


class MaidRepository(BaseRepository[Maid]):
    """Repository for Maid entities, ordered by id."""

    @property
    def model(self) -> type[Maid]:
        return Maid

    def _base_query(self) -> Select:
        return select(Maid).order_by(Maid.id)

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if isinstance(filters, MaidFilters) and filters.is_active is not None:
            query = query.where(Maid.is_active.is_(filters.is_active))
        return query

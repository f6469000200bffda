"""
Menu Repository - Data access for menu items.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select

from cafe_api.models import Menu
from .base import BaseRepository, RepositoryFilters


@dataclass
class MenuFilters(RepositoryFilters):
    """Filters specific to menus."""

    available_only: bool = False


class MenuRepository(BaseRepository[Menu]):
    """Repository for Menu entities, ordered by id."""

    @property
    def model(self) -> type[Menu]:
        return Menu

    def _base_query(self) -> Select:
        return select(Menu).order_by(Menu.id)

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if isinstance(filters, MenuFilters) and filters.available_only:
            query = query.where(Menu.stock > 0)
        return query

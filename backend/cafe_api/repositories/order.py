"""
Order Repository - Data access for orders.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, select

from cafe_api.models import Order
from .base import BaseRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    user_id: Any = None


class OrderRepository(BaseRepository[Order]):
    """Repository for Order entities, newest first."""

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        return select(Order).order_by(Order.created_at.desc(), Order.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if isinstance(filters, OrderFilters) and filters.user_id is not None:
            query = query.where(Order.user_id == filters.user_id)
        return query

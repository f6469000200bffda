"""
Repository Pattern implementation.
Centralizes data access for the cafe tables.

Usage:
    from cafe_api.repositories import MaidRepository, MaidFilters

    repo = MaidRepository(db)
    maids = repo.find_all(MaidFilters(is_active=True, limit=20))
    maid = repo.find_by_id(maid_id)
"""

from .base import BaseRepository, RepositoryFilters
from .maid import MaidRepository, MaidFilters
from .user import UserRepository
from .menu import MenuRepository, MenuFilters
from .order import OrderRepository, OrderFilters
from .instax import InstaxRepository, InstaxHistoryRepository

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Maid
    "MaidRepository",
    "MaidFilters",
    # User
    "UserRepository",
    # Menu
    "MenuRepository",
    "MenuFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
    # Instax
    "InstaxRepository",
    "InstaxHistoryRepository",
]

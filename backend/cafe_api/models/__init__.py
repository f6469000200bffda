"""
SQLAlchemy ORM Models Package.

- base: Base class, TimestampMixin, identity column type
- maid: Maid
- user: User
- menu: Menu
- order: Order
- instax: Instax, InstaxHistory
"""

from .base import Base, TimestampMixin, utcnow
from .maid import Maid
from .user import User
from .menu import Menu
from .order import Order
from .instax import Instax, InstaxHistory

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Maid",
    "User",
    "Menu",
    "Order",
    "Instax",
    "InstaxHistory",
]

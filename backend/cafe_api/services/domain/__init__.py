"""
Domain Services - resource lifecycle handlers.

Structure:
    Router (thin controller)
        ↓
    Service (lifecycle rules)  ← YOU ARE HERE
        ↓
    Repository (data access) / ObjectStore (image blobs)
        ↓
    Model (entity)

Usage:
    from cafe_api.services.domain import MaidService

    service = MaidService(db, store, settings.public_base_url)
    maids = service.list(page=1, per_page=20, is_active=True)
"""

from .maid_service import MaidService
from .menu_service import MenuService
from .user_service import UserService
from .order_service import OrderService
from .instax_service import InstaxService

__all__ = [
    "MaidService",
    "MenuService",
    "UserService",
    "OrderService",
    "InstaxService",
]

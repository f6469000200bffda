"""
HTTP routers, one module per resource.
"""

from .admin import router as admin_router
from .health import router as health_router
from .images import router as images_router
from .instax import router as instax_router
from .maids import router as maids_router
from .menus import router as menus_router
from .orders import router as orders_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "health_router",
    "images_router",
    "instax_router",
    "maids_router",
    "menus_router",
    "orders_router",
    "users_router",
]

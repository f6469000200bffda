"""
Common utilities shared across routers.
"""

from .pagination import Pagination, get_pagination
from .params import (
    available_only_query,
    history_id_path,
    instax_id_path,
    is_active_query,
    maid_id_path,
    menu_id_path,
    order_id_path,
    parse_flag,
    seat_id_path,
    user_id_path,
)

__all__ = [
    # Pagination
    "Pagination",
    "get_pagination",
    # Parameters
    "available_only_query",
    "history_id_path",
    "instax_id_path",
    "is_active_query",
    "maid_id_path",
    "menu_id_path",
    "order_id_path",
    "parse_flag",
    "seat_id_path",
    "user_id_path",
]

"""
Cross-reference validation.

Confirms that a foreign identifier points at an existing row before it is
written, so the API can answer with a field-named 400 instead of a
constraint violation.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from cafe_api.repositories import MaidRepository, MenuRepository, UserRepository
from cafe_shared.utils.exceptions import InvalidReferenceError


class ReferenceValidator:
    """Existence checks for maid, user and menu references."""

    def __init__(self, db: Session):
        self._maids = MaidRepository(db)
        self._users = UserRepository(db)
        self._menus = MenuRepository(db)

    def require_maid(self, maid_id: Optional[Any], field: str = "maid_id") -> None:
        """None passes: clearing a reference is always allowed."""
        if maid_id is not None and not self._maids.exists(maid_id):
            raise InvalidReferenceError(field, target="maid")

    def require_user(self, user_id: Any, field: str = "user_id") -> None:
        if not self._users.exists(user_id):
            raise InvalidReferenceError(field, target="user")

    def require_menu(self, menu_id: Any, field: str = "menu_id") -> None:
        if not self._menus.exists(menu_id):
            raise InvalidReferenceError(field, target="menu")

"""
Order Model: a menu item ordered by a seated user.
"""

from __future__ import annotations

from typing import Union

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cafe_shared.config.constants import OrderState

from .base import Base, EntityKey, TimestampMixin


class Order(TimestampMixin, Base):
    """
    An order placed by a user.

    Deleting the user or the menu item removes the order (ON DELETE CASCADE).
    """

    __tablename__ = "order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Union[int, str]] = mapped_column(
        EntityKey(), ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    menu_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("menu.id", ondelete="CASCADE"), nullable=False
    )
    state: Mapped[str] = mapped_column(String(16), nullable=False, default=OrderState.PENDING)

    __table_args__ = (
        CheckConstraint(
            "state IN ('pending', 'preparing', 'served')", name="chk_order_state"
        ),
        Index("idx_order_user_id", "user_id"),
        Index("idx_order_menu_id", "menu_id"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, user_id={self.user_id}, state='{self.state}')>"

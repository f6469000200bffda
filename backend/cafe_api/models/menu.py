"""
Menu Model: items offered by the cafe.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Menu(TimestampMixin, Base):
    """A menu item with remaining stock."""

    __tablename__ = "menu"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_key: Mapped[Optional[str]] = mapped_column("image_url", Text)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="chk_menu_stock_non_negative"),
        Index("idx_menu_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Menu(id={self.id}, name='{self.name}', stock={self.stock})>"

"""
User Model: a customer's seating record.
"""

from __future__ import annotations

from typing import Optional, Union

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityKey, TimestampMixin, entity_ids


class User(TimestampMixin, Base):
    """
    A customer seated at the cafe. Not an authenticated account.

    The row is never deleted; leaving is modelled by ``is_valid=False``.
    Deleting a maid nulls both maid references (ON DELETE SET NULL).
    """

    __tablename__ = "user"

    id: Mapped[Union[int, str]] = mapped_column(
        EntityKey(), primary_key=True, autoincrement=not entity_ids.generate_on_insert
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[Optional[str]] = mapped_column(String(200))
    maid_id: Mapped[Optional[Union[int, str]]] = mapped_column(
        EntityKey(), ForeignKey("maid.id", ondelete="SET NULL")
    )
    instax_maid_id: Mapped[Optional[Union[int, str]]] = mapped_column(
        EntityKey(), ForeignKey("maid.id", ondelete="SET NULL")
    )
    seat_id: Mapped[Optional[int]] = mapped_column(Integer)
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("idx_user_maid_id", "maid_id"),
        Index("idx_user_instax_maid_id", "instax_maid_id"),
        Index("idx_user_seat_id", "seat_id"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, seat_id={self.seat_id}, valid={self.is_valid})>"

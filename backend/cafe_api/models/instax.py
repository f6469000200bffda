"""
Instax Models: Instax, InstaxHistory.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityKey, utcnow


class Instax(Base):
    """An instant photo taken of a user with a maid."""

    __tablename__ = "instax"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Union[int, str]] = mapped_column(
        EntityKey(), ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    maid_id: Mapped[Union[int, str]] = mapped_column(
        EntityKey(), ForeignKey("maid.id", ondelete="CASCADE"), nullable=False
    )
    image_key: Mapped[Optional[str]] = mapped_column("image_url", Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_instax_user_id", "user_id"),
        Index("idx_instax_maid_id", "maid_id"),
    )

    def __repr__(self) -> str:
        return f"<Instax(id={self.id}, user_id={self.user_id}, maid_id={self.maid_id})>"


class InstaxHistory(Base):
    """A previous image of an instax, archived when the image was replaced."""

    __tablename__ = "instax_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instax_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("instax.id", ondelete="CASCADE"), nullable=False
    )
    image_key: Mapped[str] = mapped_column("image_url", Text, nullable=False)
    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (Index("idx_instax_history_instax_id", "instax_id"),)

    def __repr__(self) -> str:
        return f"<InstaxHistory(id={self.id}, instax_id={self.instax_id})>"

"""
Maid Model: staff members serving at the cafe.
"""

from __future__ import annotations

from typing import Optional, Union

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityKey, entity_ids


class Maid(Base):
    """
    A staff member.

    is_active controls visibility on the public listing; is_instax_available
    tells whether the maid currently takes instax photos.
    """

    __tablename__ = "maid"

    id: Mapped[Union[int, str]] = mapped_column(
        EntityKey(), primary_key=True, autoincrement=not entity_ids.generate_on_insert
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    image_key: Mapped[Optional[str]] = mapped_column("image_url", Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_instax_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Maid(id={self.id}, name='{self.name}', active={self.is_active})>"

"""
Base class and timestamp helpers for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cafe_shared.utils.identifiers import get_identifier_strategy


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """
    created_at / updated_at columns.

    updated_at is assigned by the services when a change is applied, never by
    an ON UPDATE trigger, so a no-op update leaves it untouched.
    """

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()


# Maid and user keys follow the configured identity scheme.
entity_ids = get_identifier_strategy()
EntityKey = entity_ids.column_type

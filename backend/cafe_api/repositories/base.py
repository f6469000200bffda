"""
Base Repository implementation.
Provides common data access patterns for the cafe tables.

Every write commits immediately: a multi-step mutation is a sequence of
individually atomic statements, and the lifecycle services undo earlier
steps explicitly when a later one fails.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cafe_shared.config.constants import Limits
from cafe_shared.infrastructure.db import safe_commit
from cafe_shared.utils.exceptions import DatabaseError

ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries. ``limit=None`` means unbounded."""

    limit: int | None = None
    offset: int = 0

    def __post_init__(self):
        """Validate and normalize filters."""
        if self.limit is not None:
            self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: the SQLAlchemy model class
    - _base_query(): base select with the default ordering
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    def db(self) -> Session:
        return self._db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """Return the base query including its default ordering."""
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        return query

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """Find all entities matching filters, in the default order."""
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._base_query(), filters)

        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit is not None:
            query = query.limit(filters.limit)

        return self._db.execute(query).scalars().all()

    def find_by_id(self, entity_id: Any) -> ModelT | None:
        return self._db.get(self.model, entity_id)

    def exists(self, entity_id: Any) -> bool:
        """Check if entity exists."""
        query = select(func.count()).select_from(self.model).where(self.model.id == entity_id)
        return (self._db.scalar(query) or 0) > 0

    def save(self, entity: ModelT) -> ModelT:
        """
        Save entity (insert or update) and commit.

        Returns:
            The refreshed entity

        Raises:
            IntegrityError: A constraint rejected the row; callers map it.
            DatabaseError: Any other persistence failure (500).
        """
        self._db.add(entity)
        self._commit("save")
        self._db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        """
        Hard delete entity and commit.

        ON DELETE actions may have changed other rows, so the identity map
        is expired afterwards.
        """
        self._db.delete(entity)
        self._commit("delete")
        self._db.expire_all()

    def _commit(self, operation: str) -> None:
        try:
            safe_commit(self._db)
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise DatabaseError(
                operation, table=self.model.__tablename__, error_type=type(exc).__name__
            ) from exc

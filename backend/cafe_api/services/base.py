"""
Base class for the resource lifecycle services.

Architecture:
    Router (thin) -> Service (lifecycle rules) -> Repository (data access) -> Model
                                               -> ObjectStore (image blobs)

Each service receives its collaborators through the constructor: the
database session, the object store and the public base URL used by the
mapper. Nothing is read from module level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy.orm import Session

from cafe_api.repositories.base import BaseRepository
from cafe_api.services.mappers import EntityMapper
from cafe_shared.config.logging import get_logger
from cafe_shared.infrastructure.storage import ImageUpload, ObjectStore, build_object_key
from cafe_shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

OutputT = TypeVar("OutputT")
ModelT = TypeVar("ModelT")


@dataclass(frozen=True)
class Mutation(Generic[OutputT]):
    """Result of an update. ``changed=False`` means the request was a no-op."""

    data: OutputT
    changed: bool = True


class LifecycleService:
    """Common infrastructure for the per-entity services."""

    entity_name = "Resource"

    def __init__(
        self,
        db: Session,
        store: Optional[ObjectStore] = None,
        public_base_url: str = "",
    ):
        self._db = db
        self._store = store
        self._mapper = EntityMapper(public_base_url)

    @property
    def db(self) -> Session:
        return self._db

    @property
    def mapper(self) -> EntityMapper:
        return self._mapper

    @property
    def store(self) -> ObjectStore:
        if self._store is None:
            raise RuntimeError(f"{type(self).__name__} was built without an object store")
        return self._store

    def _require(self, repo: BaseRepository[ModelT], entity_id: Any, entity: str | None = None) -> ModelT:
        """Fetch by id or raise ``NotFoundError``."""
        found = repo.find_by_id(entity_id)
        if found is None:
            raise NotFoundError(entity or self.entity_name, entity_id=str(entity_id))
        return found

    async def _put_image(self, key: str, upload: ImageUpload) -> str:
        await self.store.put(key, upload.data, upload.content_type)
        return key

    @staticmethod
    def _new_key(prefix: str, upload: ImageUpload) -> str:
        return build_object_key(prefix, upload.filename)

"""
Infrastructure module: Database, object storage, request correlation.
"""

from cafe_shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
)
from cafe_shared.infrastructure.storage import (
    ObjectStore,
    StoredObject,
    ImageUpload,
    build_object_key,
    build_public_url,
    get_object_store,
)

__all__ = [
    # db
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    # storage
    "ObjectStore",
    "StoredObject",
    "ImageUpload",
    "build_object_key",
    "build_public_url",
    "get_object_store",
]

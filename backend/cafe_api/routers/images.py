"""
Image read-through.

Serves blobs from the object store when no CDN sits in front of it, so
``image_url`` values built without a public base URL still resolve.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from cafe_shared.infrastructure.storage import ObjectStore, get_object_store
from cafe_shared.utils.exceptions import NotFoundError

router = APIRouter(prefix="/api/images", tags=["images"])


def _is_safe_key(key: str) -> bool:
    parts = key.split("/")
    return bool(key) and all(part not in ("", ".", "..") for part in parts)


@router.get("/{key:path}")
async def get_image(key: str, store: ObjectStore = Depends(get_object_store)):
    if not _is_safe_key(key):
        raise NotFoundError("Image", key=key)
    blob = await store.get(key)
    if blob is None:
        raise NotFoundError("Image", key=key)
    return Response(
        content=blob.data,
        media_type=blob.content_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )

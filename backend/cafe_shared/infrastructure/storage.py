"""
Object store adapter for image blobs.

Maid portraits, menu photos and instax captures are stored as opaque blobs
under keys of the form ``<prefix>/<uuid4>-<filename>``. The key returned by
``build_object_key`` is persisted verbatim on the owning record; API output
turns it into a URL with ``build_public_url``.

Backends:
    MemoryObjectStore      process-local dict, used by tests
    FilesystemObjectStore  files under ``storage_root`` with a content-type sidecar
    HttpObjectStore        PUT/GET/DELETE against ``storage_endpoint`` via httpx
"""

from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import httpx

from cafe_shared.config.constants import Limits
from cafe_shared.config.logging import storage_logger as logger
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.utils.exceptions import StorageError

DEFAULT_CONTENT_TYPE = "application/octet-stream"


# =============================================================================
# Value objects
# =============================================================================


@dataclass(frozen=True)
class StoredObject:
    """A blob read back from the store."""

    key: str
    data: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded file, read once at the HTTP boundary."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


# =============================================================================
# Key and URL helpers
# =============================================================================


def build_object_key(prefix: str, filename: str) -> str:
    """
    Compose a fresh storage key.

    The filename is reduced to its basename so client supplied paths never
    leak into the key hierarchy.
    """
    base = filename.replace("\\", "/").rsplit("/", 1)[-1].strip() or "upload"
    base = base[-Limits.MAX_FILENAME_LENGTH:]
    return f"{prefix.strip('/')}/{uuid.uuid4()}-{base}"


def build_public_url(base_url: Optional[str], key: Optional[str]) -> Optional[str]:
    """Join ``base_url`` and ``key``. Without a base the raw key is returned."""
    if not key:
        return None
    if not base_url:
        return key
    return f"{base_url.rstrip('/')}/{key}"


# =============================================================================
# Store interface
# =============================================================================


class ObjectStore(ABC):
    """Asynchronous put/get/delete of named blobs."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[StoredObject]:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""

    async def close(self) -> None:
        return None


class MemoryObjectStore(ObjectStore):
    """Keeps blobs in a dict. Contents vanish with the process."""

    def __init__(self) -> None:
        self._objects: dict[str, StoredObject] = {}

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        self._objects[key] = StoredObject(key=key, data=bytes(data), content_type=content_type)

    async def get(self, key: str) -> Optional[StoredObject]:
        return self._objects.get(key)

    async def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._objects)

    def __contains__(self, key: object) -> bool:
        return key in self._objects

    def __len__(self) -> int:
        return len(self._objects)


class FilesystemObjectStore(ObjectStore):
    """
    Stores each blob as a file below ``root``.

    The content type lives in a ``<file>.content-type`` sidecar next to it.
    Blocking file I/O runs in a worker thread.
    """

    SIDECAR_SUFFIX = ".content-type"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Path:
        parts = [p for p in key.split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise StorageError("path resolution", key=key)
        return self.root.joinpath(*parts)

    def _sidecar(self, path: Path) -> Path:
        return path.with_name(path.name + self.SIDECAR_SUFFIX)

    def _write(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self._sidecar(path).write_text(content_type, encoding="utf-8")

    def _read(self, key: str) -> Optional[StoredObject]:
        path = self._path_for(key)
        if not path.is_file():
            return None
        sidecar = self._sidecar(path)
        content_type = (
            sidecar.read_text(encoding="utf-8").strip() if sidecar.is_file() else DEFAULT_CONTENT_TYPE
        )
        return StoredObject(key=key, data=path.read_bytes(), content_type=content_type)

    def _remove(self, key: str) -> None:
        path = self._path_for(key)
        path.unlink(missing_ok=True)
        self._sidecar(path).unlink(missing_ok=True)

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        try:
            await asyncio.to_thread(self._write, key, data, content_type)
        except OSError as exc:
            raise StorageError("put", key=key, error=str(exc)) from exc

    async def get(self, key: str) -> Optional[StoredObject]:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as exc:
            raise StorageError("get", key=key, error=str(exc)) from exc

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except OSError as exc:
            raise StorageError("delete", key=key, error=str(exc)) from exc


class HttpObjectStore(ObjectStore):
    """
    Blob store reached over HTTP (an S3/R2 style gateway).

    Objects live at ``<endpoint>/<key>``; an optional bearer token is sent
    with every request. The client is created lazily and reused.
    """

    def __init__(
        self,
        endpoint: str,
        token: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._client

    def _url(self, key: str) -> str:
        return f"{self.endpoint}/{key}"

    async def put(self, key: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        try:
            response = await self._get_client().put(
                self._url(key), content=data, headers={"Content-Type": content_type}
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError("put", key=key, error=str(exc)) from exc

    async def get(self, key: str) -> Optional[StoredObject]:
        try:
            response = await self._get_client().get(self._url(key))
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError("get", key=key, error=str(exc)) from exc
        return StoredObject(
            key=key,
            data=response.content,
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        )

    async def delete(self, key: str) -> None:
        try:
            response = await self._get_client().delete(self._url(key))
            if response.status_code != 404:
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError("delete", key=key, error=str(exc)) from exc

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


# =============================================================================
# Helpers
# =============================================================================


async def delete_quietly(store: ObjectStore, key: Optional[str], **log_context) -> bool:
    """
    Best-effort blob removal after the owning record is already gone.

    A failure leaves an orphaned blob behind; it is logged and reported
    through the return value instead of failing the request.
    """
    if not key:
        return True
    try:
        await store.delete(key)
        return True
    except Exception as exc:
        logger.error("Failed to delete blob", key=key, error=str(exc), **log_context)
        return False


def build_object_store(settings: Settings) -> ObjectStore:
    """Instantiate the backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryObjectStore()
    if settings.storage_backend == "http":
        return HttpObjectStore(
            settings.storage_endpoint,
            token=settings.storage_token,
            timeout=settings.storage_timeout,
        )
    return FilesystemObjectStore(settings.storage_root)


@lru_cache
def get_object_store() -> ObjectStore:
    """FastAPI dependency returning the process-wide object store."""
    return build_object_store(get_settings())

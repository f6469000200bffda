"""
Normalized change sets handed to the lifecycle services.

Routers accept JSON or multipart bodies; both variants are resolved once at
the HTTP boundary into one of these structs, so each service has a single
apply-patch routine. ``UNSET`` marks a field the caller did not send, which
differs from an explicit null for nullable columns.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from cafe_shared.infrastructure.storage import ImageUpload


class _Unset:
    """Sentinel for "field not provided"."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


class _Patch:
    def provided(self) -> dict[str, Any]:
        """Fields that were sent, by name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if is_set(getattr(self, f.name))}

    def is_empty(self) -> bool:
        return not self.provided()


@dataclass
class MaidPatch(_Patch):
    name: Any = UNSET
    is_instax_available: Any = UNSET
    image: Any = UNSET


@dataclass
class MenuPatch(_Patch):
    name: Any = UNSET
    stock: Any = UNSET
    # None clears the description
    description: Any = UNSET
    image: Any = UNSET


@dataclass
class UserPatch(_Patch):
    name: Any = UNSET
    status: Any = UNSET
    maid_id: Any = UNSET
    instax_maid_id: Any = UNSET
    seat_id: Any = UNSET
    is_valid: Any = UNSET


@dataclass
class MenuDraft:
    """Everything needed to create a menu item."""

    name: str
    stock: int
    image: ImageUpload
    description: Optional[str] = None

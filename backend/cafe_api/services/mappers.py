"""
Entity mappers: stored rows to API records.

Builds the output schemas from SQLAlchemy models with automatic field
mapping plus the cafe specific normalisations:
- blank optional text becomes null
- blob keys become public URLs (raw keys when no base URL is configured)
- boolean-ish integers become booleans
- engagement_state is derived for assigned users

Usage:
    mapper = EntityMapper(settings.public_base_url)
    output = mapper.maid(maid)
    outputs = [mapper.menu(m) for m in menus]
"""

from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from cafe_shared.config.constants import EngagementState
from cafe_shared.infrastructure.storage import build_public_url
from cafe_shared.utils.schemas import (
    AssignedUserOutput,
    InstaxHistoryOutput,
    InstaxOutput,
    MaidOutput,
    MenuOutput,
    OrderOutput,
    UserOutput,
)

T = TypeVar("T", bound=BaseModel)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC. Naive values read back from SQLite are UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Blank or whitespace-only text becomes None."""
    if value is None:
        return None
    return value if value.strip() else None


def engagement_state(status: Optional[str]) -> str:
    """"leaving" iff the trimmed, case-folded status is exactly "leaving"."""
    if status is not None and status.strip().lower() == EngagementState.LEAVING:
        return EngagementState.LEAVING
    return EngagementState.SERVING


class EntityOutputBuilder:
    """
    Generic builder for converting SQLAlchemy models to Pydantic schemas.

    Fields with matching names are copied; datetimes are serialized when the
    schema expects a string; overrides win over entity attributes.
    """

    def __init__(self, output_class: Type[T]):
        self.output_class = output_class
        self._field_names = set(output_class.model_fields.keys())
        self._type_hints = get_type_hints(output_class)

    def build(self, entity: Any, **overrides: Any) -> T:
        data = {}

        for field_name in self._field_names:
            if field_name in overrides:
                data[field_name] = overrides[field_name]
                continue

            if hasattr(entity, field_name):
                value = getattr(entity, field_name)

                if isinstance(value, datetime):
                    expected_type = self._type_hints.get(field_name)
                    if expected_type == str or _is_optional_str(expected_type):
                        value = format_timestamp(value)

                data[field_name] = value

        return self.output_class(**data)


def _is_optional_str(type_hint: Any) -> bool:
    """Check if type hint is Optional[str]."""
    if get_origin(type_hint) is None:
        return False
    args = get_args(type_hint)
    if args and type(None) in args:
        non_none_args = [a for a in args if a is not type(None)]
        return len(non_none_args) == 1 and non_none_args[0] == str
    return False


class EntityMapper:
    """Pure row-to-record transforms bound to one public base URL."""

    def __init__(self, public_base_url: Optional[str] = None):
        self.public_base_url = public_base_url or ""
        self._maid = EntityOutputBuilder(MaidOutput)
        self._user = EntityOutputBuilder(UserOutput)
        self._assigned = EntityOutputBuilder(AssignedUserOutput)
        self._menu = EntityOutputBuilder(MenuOutput)
        self._order = EntityOutputBuilder(OrderOutput)
        self._instax = EntityOutputBuilder(InstaxOutput)
        self._history = EntityOutputBuilder(InstaxHistoryOutput)

    def url(self, key: Optional[str]) -> Optional[str]:
        return build_public_url(self.public_base_url, key)

    def maid(self, maid) -> MaidOutput:
        return self._maid.build(
            maid,
            image_url=self.url(maid.image_key),
            is_active=bool(maid.is_active),
            is_instax_available=bool(maid.is_instax_available),
        )

    def user(self, user) -> UserOutput:
        return self._user.build(
            user,
            name=normalize_text(user.name),
            status=normalize_text(user.status),
            is_valid=bool(user.is_valid),
        )

    def assigned_user(self, user, latest_instax_id: Optional[int] = None) -> AssignedUserOutput:
        return self._assigned.build(
            user,
            name=normalize_text(user.name),
            status=normalize_text(user.status),
            is_valid=bool(user.is_valid),
            engagement_state=engagement_state(user.status),
            latest_instax_id=latest_instax_id,
        )

    def menu(self, menu) -> MenuOutput:
        return self._menu.build(
            menu,
            description=normalize_text(menu.description),
            image_url=self.url(menu.image_key),
        )

    def order(self, order) -> OrderOutput:
        return self._order.build(order)

    def instax(self, instax) -> InstaxOutput:
        return self._instax.build(instax, image_url=self.url(instax.image_key))

    def instax_history(self, history, instax) -> InstaxHistoryOutput:
        """Archived image with the owning instax's user and maid."""
        return self._history.build(
            history,
            image_url=self.url(history.image_key),
            user_id=instax.user_id,
            maid_id=instax.maid_id,
        )

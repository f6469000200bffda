"""
Identity generation and parsing.

Maid and user ids were sequential integers in early deployments and random
UUIDs later. Both shapes live behind ``IdentifierStrategy`` so the models,
repositories and path validation never hardcode either format.

Usage:
    from cafe_shared.utils.identifiers import get_identifier_strategy, positive_int_ids

    strategy = get_identifier_strategy()
    maid_id = strategy.parse(raw, entity="maid")   # raises ValidationError
    new_id = strategy.generate()                    # None = storage assigns
"""

from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Union

from sqlalchemy import Integer, String
from sqlalchemy.types import TypeEngine

from cafe_shared.utils.exceptions import ValidationError

EntityId = Union[int, str]

_POSITIVE_INT_RE = re.compile(r"^[1-9]\d*$")
_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class IdentifierStrategy(ABC):
    """Parses, generates and stores identifiers of one shape."""

    name: str
    # Human readable format, used in field level messages
    label: str

    @abstractmethod
    def is_valid(self, raw: Any) -> bool:
        """True when ``raw`` has the exact accepted format."""

    @abstractmethod
    def coerce(self, raw: Any) -> EntityId:
        """Convert an already validated value to its canonical type."""

    @abstractmethod
    def generate(self) -> EntityId | None:
        """New identifier, or None when the storage layer assigns it."""

    @abstractmethod
    def column_type(self) -> TypeEngine:
        """SQLAlchemy column type for primary and foreign keys."""

    # False when the database sequence assigns the value on insert
    generate_on_insert: bool = True

    def parse(self, raw: Any, entity: str = "resource", message: str | None = None) -> EntityId:
        """
        Validate and coerce an identifier coming from the outside.

        Raises:
            ValidationError: ``"Invalid <entity> id."`` unless ``message`` is given.
        """
        if isinstance(raw, bool) or not self.is_valid(raw):
            raise ValidationError(message or f"Invalid {entity} id.", entity=entity)
        return self.coerce(raw)

    def parse_field(self, raw: Any, field: str) -> EntityId:
        """Parse a body or form field, reporting "<field> must be a valid <label>."."""
        if isinstance(raw, str):
            raw = raw.strip()
        return self.parse(raw, entity=field, message=f"{field} must be a valid {self.label}.")

    def parse_optional(self, raw: Any, entity: str = "resource", message: str | None = None) -> EntityId | None:
        if raw is None:
            return None
        return self.parse(raw, entity=entity, message=message)


class IntegerIdentifiers(IdentifierStrategy):
    """Positive integers assigned by the database sequence."""

    name = "integer"
    label = "positive integer"
    generate_on_insert = False

    def is_valid(self, raw: Any) -> bool:
        if isinstance(raw, int):
            return raw >= 1
        return isinstance(raw, str) and bool(_POSITIVE_INT_RE.match(raw))

    def coerce(self, raw: Any) -> int:
        return int(raw)

    def generate(self) -> None:
        return None

    def column_type(self) -> TypeEngine:
        return Integer()


class UuidIdentifiers(IdentifierStrategy):
    """Random version-4 UUIDs in canonical 8-4-4-4-12 text form."""

    name = "uuid"
    label = "UUID"
    generate_on_insert = True

    def is_valid(self, raw: Any) -> bool:
        return isinstance(raw, str) and bool(_UUID_RE.match(raw))

    def coerce(self, raw: Any) -> str:
        return str(raw).lower()

    def generate(self) -> str:
        return str(uuid.uuid4())

    def column_type(self) -> TypeEngine:
        return String(36)


_STRATEGIES: dict[str, type[IdentifierStrategy]] = {
    IntegerIdentifiers.name: IntegerIdentifiers,
    UuidIdentifiers.name: UuidIdentifiers,
}


def build_identifier_strategy(scheme: str) -> IdentifierStrategy:
    try:
        return _STRATEGIES[scheme]()
    except KeyError:
        raise ValueError(f"Unknown id scheme: {scheme!r}") from None


@lru_cache
def get_identifier_strategy() -> IdentifierStrategy:
    """Strategy for maid and user ids, chosen by ``settings.id_scheme``."""
    from cafe_shared.config.settings import get_settings

    return build_identifier_strategy(get_settings().id_scheme)


# Menu, order, instax and history ids are always database sequences.
positive_int_ids = IntegerIdentifiers()

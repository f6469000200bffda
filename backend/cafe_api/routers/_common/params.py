"""
Path and query parameter parsing.

Every id-bearing path parameter goes through an identifier strategy before
any query is issued, so a malformed id is a 400 without touching storage.
"""

from typing import Optional

from fastapi import Path, Query

from cafe_shared.config.constants import FALSE_STRINGS, TRUE_STRINGS
from cafe_shared.utils.exceptions import ValidationError
from cafe_shared.utils.identifiers import EntityId, get_identifier_strategy, positive_int_ids


def parse_flag(
    raw: Optional[str],
    true_values=TRUE_STRINGS,
    false_values=FALSE_STRINGS,
    message: str = "Invalid boolean value.",
) -> Optional[bool]:
    """
    Parse a boolean-ish string; None stays None.

    Raises:
        ValidationError: ``message`` when the value is not recognised.
    """
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in true_values:
        return True
    if value in false_values:
        return False
    raise ValidationError(message, value=raw)


# =============================================================================
# Path dependencies
# =============================================================================


def maid_id_path(maid_id: str = Path(..., description="Maid identifier.")) -> EntityId:
    return get_identifier_strategy().parse(maid_id, entity="maid")


def user_id_path(user_id: str = Path(..., description="User identifier.")) -> EntityId:
    return get_identifier_strategy().parse(user_id, entity="user")


def menu_id_path(menu_id: str = Path(..., description="Menu identifier.")) -> int:
    return positive_int_ids.parse(menu_id, entity="menu")


def order_id_path(order_id: str = Path(..., description="Order identifier.")) -> int:
    return positive_int_ids.parse(order_id, entity="order")


def instax_id_path(instax_id: str = Path(..., description="Instax identifier.")) -> int:
    return positive_int_ids.parse(instax_id, entity="instax")


def history_id_path(history_id: str = Path(..., description="Instax history identifier.")) -> int:
    return positive_int_ids.parse(history_id, entity="instax history")


def seat_id_path(seat_id: str = Path(..., description="Seat number.")) -> int:
    return positive_int_ids.parse(seat_id, entity="seat")


# =============================================================================
# Query dependencies
# =============================================================================


def is_active_query(
    is_active: Optional[str] = Query(default=None, description="Filter by active flag."),
    is_active_camel: Optional[str] = Query(default=None, alias="isActive", include_in_schema=False),
) -> Optional[bool]:
    raw = is_active if is_active is not None else is_active_camel
    return parse_flag(
        raw,
        true_values={"true", "1", "yes"},
        false_values={"false", "0", "no"},
        message="Invalid is_active parameter. Use true/false.",
    )


def available_only_query(
    available_only: Optional[str] = Query(default=None, description="Only items with stock left."),
) -> bool:
    """Only ``true`` and ``1`` enable the filter; anything else lists all."""
    return available_only is not None and available_only.strip().lower() in {"true", "1"}

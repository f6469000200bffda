"""
Centralized constants for the backend application.
Avoids magic strings and repeated constants.

Usage:
    from cafe_shared.config.constants import OrderState, EngagementState, Limits

    if order.state == OrderState.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# Entity State Constants
# =============================================================================


class OrderState:
    """Order state constants."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    SERVED: Final[str] = "served"

    ALL: Final[tuple[str, ...]] = (PENDING, PREPARING, SERVED)


class EngagementState:
    """Derived engagement of a user with the maid serving them."""

    SERVING: Final[str] = "serving"
    LEAVING: Final[str] = "leaving"

    ALL: Final[tuple[str, ...]] = (SERVING, LEAVING)


class EngagementFilter:
    """Filter values accepted by the assigned-users listing."""

    SERVING: Final[str] = EngagementState.SERVING
    LEAVING: Final[str] = EngagementState.LEAVING
    BOTH: Final[str] = "both"

    ALL: Final[tuple[str, ...]] = (SERVING, LEAVING, BOTH)


class ApiTier:
    """Shared-secret tiers guarding privileged endpoints."""

    ADMIN: Final[str] = "admin"
    MAID: Final[str] = "maid"


# =============================================================================
# Object Store Key Prefixes
# =============================================================================


class StoragePrefix:
    """Top-level key prefixes, one per image-bearing entity."""

    MAIDS: Final[str] = "maids"
    MENUS: Final[str] = "menus"
    INSTAX: Final[str] = "instax"


# =============================================================================
# Input Parsing
# =============================================================================

TRUE_STRINGS: Final[frozenset[str]] = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS: Final[frozenset[str]] = frozenset({"false", "0", "no", "off"})


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Validation limits and pagination bounds."""

    DEFAULT_PAGE_SIZE: Final[int] = 20
    MAX_PAGE_SIZE: Final[int] = 100

    MAX_STATUS_LENGTH: Final[int] = 200
    MAX_NAME_LENGTH: Final[int] = 100
    MAX_DESCRIPTION_LENGTH: Final[int] = 1000
    MAX_FILENAME_LENGTH: Final[int] = 120

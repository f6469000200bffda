"""
Configuration module: Settings, logging, constants.
"""

from cafe_shared.config.settings import settings, get_settings, Settings, DATABASE_URL
from cafe_shared.config.logging import get_logger, setup_logging
from cafe_shared.config.constants import (
    ApiTier,
    EngagementFilter,
    EngagementState,
    Limits,
    OrderState,
    StoragePrefix,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    "Settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "ApiTier",
    "EngagementFilter",
    "EngagementState",
    "Limits",
    "OrderState",
    "StoragePrefix",
]

"""
Services module for business logic.

- domain/: one lifecycle service per entity - USE THESE from routers
- mappers.py: row to API record transforms
- references.py: foreign id existence checks
- saga.py: multi-step writes with compensation
- patches.py: normalized partial-update structs
"""

from .base import LifecycleService, Mutation
from .domain import InstaxService, MaidService, MenuService, OrderService, UserService
from .mappers import EntityMapper
from .patches import UNSET, MaidPatch, MenuDraft, MenuPatch, UserPatch
from .references import ReferenceValidator
from .saga import Saga

__all__ = [
    "LifecycleService",
    "Mutation",
    "InstaxService",
    "MaidService",
    "MenuService",
    "OrderService",
    "UserService",
    "EntityMapper",
    "UNSET",
    "MaidPatch",
    "MenuDraft",
    "MenuPatch",
    "UserPatch",
    "ReferenceValidator",
    "Saga",
]

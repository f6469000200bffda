"""
Utilities module: Exceptions, identifiers, envelopes, schemas.
"""

from cafe_shared.utils.exceptions import (
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "InvalidReferenceError",
    "NotFoundError",
    "ValidationError",
]

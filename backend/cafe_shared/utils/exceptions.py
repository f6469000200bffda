"""
Centralized HTTP exceptions for consistent error handling.

Every exception renders as the error envelope
``{"success": false, "message": ..., "details": ...}`` through the
handlers registered in ``cafe_api.core.errors``.

Usage:
    from cafe_shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Maid")
    raise ValidationError("Invalid pagination parameters.")
    raise InvalidReferenceError("maid_id")
"""

from typing import Any

from fastapi import HTTPException, status

from cafe_shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class to ensure consistent
    logging and response format. ``details`` is serialized verbatim
    into the error envelope.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        details: Any = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.details = details

    @property
    def message(self) -> str:
        return str(self.detail)


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Invalid maid id.")
        raise ValidationError("Invalid request body.", details=errors)
    """

    def __init__(self, detail: str, details: Any = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            details=details,
            **log_context,
        )


class InvalidReferenceError(ValidationError):
    """A foreign identifier does not point at an existing record (400)."""

    def __init__(self, field: str, target: str = "maid", **log_context: Any):
        super().__init__(
            f"{field} does not reference an existing {target}.",
            field=field,
            target=target,
            **log_context,
        )
        self.field = field


# =============================================================================
# 401 Unauthorized
# =============================================================================


class UnauthorizedError(AppException):
    """Missing or wrong shared secret (401)."""

    def __init__(self, header: str = "x-api-key", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unauthorized: Missing or invalid {header} header.",
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Maid")
        raise NotFoundError("Menu", menu_id=menu_id)
    """

    def __init__(self, entity: str, detail: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{entity} not found.",
            log_level="warning",
            entity=entity,
            **log_context,
        )


class SeatVacantError(NotFoundError):
    """No valid user currently occupies the seat."""

    def __init__(self, seat_id: int, **log_context: Any):
        super().__init__(
            "Seat",
            detail="No active user found for the specified seat.",
            seat_id=seat_id,
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Maid id already exists.")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to create menu.", menu_id=12)
    """

    def __init__(self, detail: str = "Internal Server Error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class ConfigurationError(InternalError):
    """Server-side misconfiguration, distinct from a caller mistake."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)


class StorageError(InternalError):
    """Blob store operation failed."""

    def __init__(self, operation: str, key: str | None = None, **log_context: Any):
        super().__init__(
            f"Object storage failed during {operation}.",
            operation=operation,
            key=key,
            **log_context,
        )
        self.operation = operation
        self.key = key


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        super().__init__(f"Database error during {operation}.", operation=operation, **log_context)

"""
Response envelopes shared by every endpoint.

Success: ``{"success": true, "message": "...", "data": ...}``
Error:   ``{"success": false, "message": "...", "details": ...}``
"""

from typing import Any, Generic, Iterable, Literal, Mapping, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful API response wrapper."""

    success: Literal[True] = True
    message: str = "OK"
    data: T


class ApiErrorResponse(BaseModel):
    """Error response payload."""

    success: Literal[False] = False
    message: str
    details: Any = None


def ok(data: Any, message: str = "OK") -> ApiResponse:
    return ApiResponse(data=data, message=message)


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    """Error envelope as a plain dict; ``details`` is omitted when empty."""
    body: dict[str, Any] = {"success": False, "message": message}
    if details is not None:
        body["details"] = details
    return body


_LOCATION_PREFIXES = {"body", "query", "path", "header", "form"}


def flatten_validation_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Group Pydantic error entries by field.

    Returns ``{"form_errors": [...], "field_errors": {"name": [...]}}``;
    errors without a field location land in ``form_errors``.
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        message = str(error.get("msg", "Invalid value"))
        if loc:
            field_errors.setdefault(".".join(loc), []).append(message)
        else:
            form_errors.append(message)

    return {"form_errors": form_errors, "field_errors": field_errors}

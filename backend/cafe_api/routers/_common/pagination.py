"""
Pagination for list endpoints.

Page numbers are parsed by hand instead of through typed Query parameters
so that a bad value answers "Invalid pagination parameters." rather than a
generic body validation error.

Usage:
    from cafe_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/maids")
    def list_maids(pagination: Pagination = Depends(get_pagination)):
        ...
"""

import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from cafe_shared.config.constants import Limits
from cafe_shared.utils.exceptions import ValidationError

_INT_RE = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class Pagination:
    """1-based page number and page size."""

    page: int = 1
    per_page: int = Limits.DEFAULT_PAGE_SIZE

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def _parse_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    raw = raw.strip()
    if not _INT_RE.match(raw):
        raise ValidationError("Invalid pagination parameters.", value=raw)
    return int(raw)


def get_pagination(
    page: Optional[str] = Query(default=None, description="Page number (1-based)."),
    per_page: Optional[str] = Query(default=None, description="Items per page (max 100)."),
    per_page_camel: Optional[str] = Query(default=None, alias="perPage", include_in_schema=False),
) -> Pagination:
    """
    FastAPI dependency for page/per_page (``perPage`` is accepted too).

    Raises:
        ValidationError: page < 1, per_page outside 1..100, or not an integer.
    """
    page_value = _parse_int(page, 1)
    per_page_value = _parse_int(per_page if per_page is not None else per_page_camel, Limits.DEFAULT_PAGE_SIZE)

    if page_value < 1 or per_page_value < 1 or per_page_value > Limits.MAX_PAGE_SIZE:
        raise ValidationError("Invalid pagination parameters.", page=page_value, per_page=per_page_value)

    return Pagination(page=page_value, per_page=per_page_value)

"""
Request correlation ids.

Each request gets an id that is echoed in the ``X-Request-ID`` response header
and stamped on every log line emitted while handling it. Staff tablets send
their own id so a failed photo upload can be traced from the device to the
server logs.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
# Accepted from older clients that predate X-Request-ID
FALLBACK_HEADERS = ("X-Correlation-ID",)

# Client supplied ids end up in logs and headers verbatim
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def request_id_of(request: Request) -> Optional[str]:
    """
    Correlation id recorded on ``request.state``.

    Exception handlers run after the middleware has reset the context
    variable, so they read the id from the request state instead.
    """
    return getattr(request.state, "request_id", None)


def resolve_request_id(headers) -> str:
    """Reuse a well-formed client id, otherwise mint a new one."""
    for name in (REQUEST_ID_HEADER, *FALLBACK_HEADERS):
        candidate = (headers.get(name) or "").strip()
        if candidate and _SAFE_REQUEST_ID.match(candidate):
            return candidate
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id to the request and echo it on the response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers)
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class CorrelationIdFilter:
    """Logging filter that sets ``record.request_id`` ("-" outside a request)."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True

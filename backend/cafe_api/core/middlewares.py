"""
Security middlewares for the FastAPI application.
Implements security headers and request correlation.
"""

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from cafe_shared.infrastructure.correlation import CorrelationIdMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff (prevent MIME sniffing)
    - X-Frame-Options: DENY (prevent clickjacking)
    - Referrer-Policy: strict-origin-when-cross-origin
    - Permissions-Policy: disable dangerous browser features
    - Content-Security-Policy: API responses never load sub-resources
    - Strict-Transport-Security: production only
    """

    async def dispatch(self, request: Request, call_next):
        from cafe_shared.config.settings import get_settings

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        csp_directives = [
            "default-src 'none'",
            "img-src 'self' data: https:",
            "frame-ancestors 'none'",
            "base-uri 'none'",
        ]
        response.headers["Content-Security-Policy"] = "; ".join(csp_directives)

        if get_settings().environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Register middlewares on the FastAPI application.

    Order matters: middlewares are executed in reverse order of registration.
    CorrelationId runs first so security headers and handlers see the id.
    """
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

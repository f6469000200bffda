"""
CORS (Cross-Origin Resource Sharing) configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cafe_shared.config.settings import get_settings

ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]

ALLOWED_HEADERS = [
    "Content-Type",
    "X-API-Key",
    "X-Request-ID",
    "Accept",
    "Accept-Language",
    "Cache-Control",
]


def configure_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware on the FastAPI application.

    Production: set ALLOWED_ORIGINS (comma-separated).
    Development: an empty value allows any origin.
    """
    settings = get_settings()
    origins = settings.cors_origins
    # Browsers reject credentials together with a wildcard origin
    allow_credentials = origins != ["*"]
    max_age = 0 if settings.environment == "development" else 600

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=["X-Request-ID"],
        max_age=max_age,
    )

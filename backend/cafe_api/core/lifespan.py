"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from cafe_api.models import Base
from cafe_shared.config.logging import api_logger as logger
from cafe_shared.config.logging import setup_logging
from cafe_shared.config.settings import get_settings
from cafe_shared.infrastructure.db import engine
from cafe_shared.infrastructure.storage import get_object_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    settings = get_settings()

    setup_logging(settings)

    # Validate production secrets before startup
    config_errors = settings.validate_production_secrets()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with insecure configuration."
            )
        else:
            logger.warning("Running with insecure defaults (acceptable for development only)")

    logger.info(
        "Starting maid cafe API",
        port=settings.rest_api_port,
        env=settings.environment,
        id_scheme=settings.id_scheme,
        storage=settings.storage_backend,
    )

    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down maid cafe API")

    await get_object_store().close()
    logger.info("Object store closed")

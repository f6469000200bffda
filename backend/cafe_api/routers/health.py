"""
Health check router.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cafe_shared.config.logging import api_logger as logger
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.infrastructure.db import get_db
from cafe_shared.utils.responses import ApiResponse, error_body, ok
from cafe_shared.utils.schemas import HealthOutput

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthOutput])
def health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Liveness plus a ``SELECT 1`` against the database; 503 when it fails."""
    health = HealthOutput(
        status="healthy",
        service="maid-cafe-api",
        environment=settings.environment,
        database="healthy",
    )
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed", error=str(e))
        health.status = "degraded"
        health.database = "unhealthy"
        return JSONResponse(
            status_code=503,
            content=error_body("Database unavailable.", details=health.model_dump()),
        )
    return ok(health)

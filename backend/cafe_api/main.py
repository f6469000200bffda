"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from cafe_api.core import configure_cors, lifespan, register_exception_handlers, register_middlewares
from cafe_api.routers import (
    admin_router,
    health_router,
    images_router,
    instax_router,
    maids_router,
    menus_router,
    orders_router,
    users_router,
)
from cafe_shared.config.settings import settings


def create_app() -> FastAPI:
    app = FastAPI(
        title="Maid Cafe API",
        description="Maids, seating, menu, orders and instax photos for a maid cafe",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    register_middlewares(app)
    configure_cors(app)

    app.include_router(health_router)
    app.include_router(maids_router)
    app.include_router(menus_router)
    app.include_router(users_router)
    app.include_router(orders_router)
    app.include_router(instax_router)
    app.include_router(admin_router)
    app.include_router(images_router)

    return app


app = create_app()


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cafe_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )

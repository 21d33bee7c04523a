# This file builds the FastAPI application and registers the API routers.
# It exists so startup behavior, logging, and error handling are configured in one place.
# The app is a thin transport around the datasource assembler; all protocol rules live in `src.datasource`.

from __future__ import annotations

from fastapi import FastAPI

from src.api.error_handlers import register_error_handlers
from src.api.routers.datasource import router as datasource_router
from src.api.routers.health import router as health_router
from src.common.logging import configure_logging
from src.common.settings import get_settings


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Chart Tools datasource protocol (version 0.6) endpoint.",
        version="0.1.0",
        openapi_tags=[
            {"name": "health", "description": "Service liveness."},
            {"name": "datasource", "description": "Datasource protocol responses for chart clients."},
        ],
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(datasource_router)

    return app


app = create_app()

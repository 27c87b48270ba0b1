"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from heritage_shared.config import settings
from heritage_pipeline.utils.logging import configure_logging

from heritage_api import __version__
from heritage_api.middleware.logging import LoggingMiddleware
from heritage_api.routers.health import router as health_router
from heritage_api.routers.sync import router as sync_router
from heritage_api.utils.health import StoreHealthCache

logger = structlog.get_logger()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Heritage Hunter Sync API",
        description="Triggers for the unclaimed-inheritance land sync",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.state.store_health = StoreHealthCache(ttl_s=settings.health_check_ttl_s)

    # Routers
    app.include_router(health_router)
    app.include_router(sync_router)

    logger.info("app_created", cors_origins=settings.cors_origins_list)
    return app


app = create_app()

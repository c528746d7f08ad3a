"""Portfolio CMS API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map PortfolioError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One DatabaseSessionManager per process: created in the lifespan, kept on
      app.state, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py, which owns the
      outcome → status table
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import (
    blog, catalog, categories, dashboard, faq, health, projects, services,
    technologies,
)
from app.config import get_settings
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup, dispose it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, service=settings.service_name)
    app.state.db_manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout_seconds,
        echo=settings.database_echo,
    )
    logger.info(f"{settings.service_name} {settings.service_version} started")
    try:
        yield
    finally:
        logger.info(f"{settings.service_name} shutting down")
        await app.state.db_manager.close()
        app.state.db_manager = None


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title="Portfolio CMS API",
        version=settings.service_version,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Explicit registration, one router per resource
    for module in (
        health, categories, projects, technologies, faq, blog, services,
        catalog, dashboard,
    ):
        application.include_router(module.router)

    register_error_handlers(application)
    return application


app = create_app()

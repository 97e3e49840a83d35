"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes (the debug enumeration route only outside production)
- Middleware (logging, CORS)
- Rate limiting and exception handlers
- The URL store and service, created on startup and closed on shutdown

Run with ``python -m shortener`` or ``uvicorn shortener.main:app``.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortener.api import endpoints
from shortener.api.error_handlers import register_exception_handlers
from shortener.core.rate_limit import limiter
from shortener.core.setting import Settings, settings as default_settings
from shortener.db import URLStore, build_store
from shortener.middleware.logging import add_logging_middleware, configure_logging
from shortener.services.url_service import URLService

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[URLStore] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment settings)
        store: URL store to use; when omitted one is built from the settings
            on startup

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title="URL Shortener Service",
        description="Shortens (and lengthens) URLs and counts their visits",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = app_settings
    # The limiter is shared by every app in the process; the latest app wins
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter

    register_exception_handlers(app)
    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        return {"status": "ok"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    if not app_settings.is_production:
        app.include_router(endpoints.debug_router, tags=["Debug"])
    app.include_router(endpoints.router, tags=["URL Shortener"])

    @app.on_event("startup")
    async def startup_event():
        """Create the store and the service on startup."""
        url_store = store or build_store(app_settings)
        await url_store.initialize()
        app.state.store = url_store
        app.state.url_service = URLService(
            url_store,
            short_token_length=app_settings.SHORT_TOKEN_LENGTH,
            min_long_token_length=app_settings.MIN_LONG_TOKEN_LENGTH,
            long_token_scale_factor=app_settings.LONG_TOKEN_SCALE_FACTOR,
            max_create_attempts=app_settings.MAX_CREATE_ATTEMPTS,
        )
        logger.info(
            f"URL shortener started: env={app_settings.ENV_SETTING.value}, "
            f"store={type(url_store).__name__}"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the store on shutdown."""
        await app.state.store.close()
        logger.info("URL shortener stopped")

    return app


app = create_app()

"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from orbit_rbac import __version__
from orbit_rbac.api import api_router
from orbit_rbac.config import Settings, settings
from orbit_rbac.core.errors.handlers import register_exception_handlers
from orbit_rbac.core.logging import configure_logging
from orbit_rbac.rbac.seeding import bootstrap
from orbit_rbac.stores import create_store
from orbit_rbac.stores.base import AuthzStore


logger = structlog.get_logger()


def create_app(
    store: AuthzStore | None = None, config: Settings | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Store to serve; built from settings at startup when omitted
        config: Settings to use instead of the process-wide ones

    Returns:
        Configured FastAPI application instance.
    """
    config = config or settings
    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler.

        Builds the store and runs the idempotent bootstrap seeding.
        """
        logger.info(
            "application_startup",
            app_name=config.app_name,
            environment=config.environment,
        )

        if app.state.store is None:
            app.state.store = create_store(config)

        if config.seed_on_startup:
            bootstrap(app.state.store, config=config)

        yield

        logger.info("application_shutdown")

    app = FastAPI(
        title=config.app_name,
        description="Multi-tenant role-based access control",
        version=__version__,
        debug=config.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not config.is_production else None,
        redoc_url="/redoc" if not config.is_production else None,
        openapi_url="/openapi.json" if not config.is_production else None,
    )
    app.state.store = store

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app

"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (tables, database pool).
Middleware, CORS, exception handlers and routers are all registered here;
each concern lives in its own module.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pipecraft import __version__
from pipecraft.api import api_router
from pipecraft.config import Settings, get_settings
from pipecraft.db.engine import engine, init_models
from pipecraft.errors import register_exception_handlers
from pipecraft.middleware.request_id import RequestIdMiddleware
from pipecraft.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "pipecraft.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.is_development:
        # Production schemas are managed by Alembic
        await init_models()
        logger.info("pipecraft.tables_ready")

    yield

    logger.info("pipecraft.shutdown")
    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Pipecraft",
        description="Company website backend — accounts, careers, projects, services and contacts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Middleware stack ──────────────────────────────────────
    # Starlette runs middleware in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=not settings.is_development)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: pipecraft.main:app)
app = create_app()

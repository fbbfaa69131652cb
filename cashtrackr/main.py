"""CashTrackr API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CashTrackrError → structured JSON responses
    - Settings are bound to the app when it is built (app.state.settings);
      request dependencies read them from there, never from a process global
    - The database manager is created in the lifespan and stored on app.state.db

Design Decisions:
    - create_app(settings) factory: tests and scripts can build an app around
      their own Settings; the module-level app uses the environment
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cashtrackr.api.error_handlers import register_error_handlers
from cashtrackr.api.routes import auth, budgets, expenses, health
from cashtrackr.config import Settings, get_settings
from cashtrackr.infrastructure.database import DatabaseSessionManager
from cashtrackr.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    app.state.db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("CashTrackr API started")
    yield
    await app.state.db.dispose()
    logger.info("CashTrackr API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="CashTrackr API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(budgets.router)
    app.include_router(expenses.router)

    register_error_handlers(app)
    return app


app = create_app()

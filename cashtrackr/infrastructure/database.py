"""Database Session Manager — async engine, per-request sessions, error mapping.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - SQLAlchemy failures leave this module as DatabaseError; the driver text goes
      to the log, never to the client
    - One manager per application, created in the lifespan and kept on app.state
    - Repositories translate the constraint violations they understand (duplicate
      email) before a generic IntegrityError can reach this layer

Design Decisions:
    - Postgres gets a tuned pool with pre-ping; SQLite URLs (local runs, tests) use
      the dialect's default pool since it rejects pool sizing arguments
    - expire_on_commit=False: records are built from rows after commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from cashtrackr.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError subclass DBAPIError
_ERROR_OPERATIONS = (
    (IntegrityError, "commit"),
    (OperationalError, "connect"),
    (DBAPIError, "query"),
    (SQLAlchemyError, "unknown"),
)


def _operation_for(exc: SQLAlchemyError) -> str:
    for exc_type, operation in _ERROR_OPERATIONS:
        if isinstance(exc, exc_type):
            return operation
    return "unknown"


class DatabaseSessionManager:
    """Owns the engine and hands out sessions with rollback and error mapping."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_args = {}
        if not database_url.startswith("sqlite"):
            engine_args = dict(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_args)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            operation = _operation_for(e)
            logger.error(
                f"DB {operation} failed: {e}", extra={"error_code": "DATABASE_ERROR"},
            )
            raise DatabaseError(type(e).__name__, operation)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness endpoint)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError:
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db", None)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request from the app's manager."""
    manager = get_manager(request)
    if manager is None:
        raise RuntimeError("Database not initialized")
    async with manager.session() as session:
        yield session

"""Database Session Manager — rollback, error mapping and health checks.

Tests cover:
    - SQLAlchemy failures leave the session as DatabaseError (503, generic message)
    - non-database exceptions propagate unchanged
    - health_check against a reachable SQLite database
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from cashtrackr.core.errors import DatabaseError
from cashtrackr.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    yield manager
    await manager.dispose()


async def test_health_check_reachable(manager):
    assert await manager.health_check() is True


async def test_integrity_error_mapped_without_leaking_driver_text(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session():
            raise IntegrityError(
                "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email"),
            )
    assert exc.value.http_status == 503
    assert exc.value.operation == "commit"
    body = exc.value.to_response()["error"]
    assert body["message"] == "Hubo un error"
    assert "users" not in body["message"]


async def test_operational_error_mapped(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert exc.value.operation == "connect"


async def test_other_exceptions_propagate(manager):
    with pytest.raises(KeyError):
        async with manager.session():
            raise KeyError("budget")

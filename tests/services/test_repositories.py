"""SQL Repositories — constraint and missing-row behaviour against SQLite.

Tests cover:
    - a duplicate email on create or update surfaces as EmailTakenError (409),
      never as a DatabaseError
    - the session stays usable after the rejected commit
    - update() of a missing user, budget or expense raises not-found
"""

from decimal import Decimal

import pytest

from cashtrackr.core.errors import (
    EMAIL_REGISTERED, EMAIL_USED_BY_OTHER,
    EmailTakenError, ResourceNotFoundError, UserNotFoundError,
)
from cashtrackr.infrastructure.repositories import SqlUserRepository


def _fields(email: str) -> dict:
    return {"name": "Juan", "email": email, "password": "hash", "confirmed": True}


async def test_duplicate_email_on_create_is_a_conflict(test_db, user):
    repo = SqlUserRepository(test_db)

    with pytest.raises(EmailTakenError) as exc:
        await repo.create(_fields("test@test.com"))

    assert exc.value.http_status == 409
    assert exc.value.message == EMAIL_REGISTERED
    assert (await repo.find_by_email("test@test.com")).id == user.id


async def test_session_usable_after_duplicate(test_db, user):
    repo = SqlUserRepository(test_db)
    with pytest.raises(EmailTakenError):
        await repo.create(_fields("test@test.com"))

    created = await repo.create(_fields("nuevo@test.com"))
    assert created.email == "nuevo@test.com"


async def test_email_taken_by_other_on_update(test_db, user, make_user, fresh_repos):
    other = await make_user(email="otro@test.com")

    with pytest.raises(EmailTakenError) as exc:
        await SqlUserRepository(test_db).update(other.id, {"email": "test@test.com"})

    assert exc.value.message == EMAIL_USED_BY_OTHER
    users, _, _ = fresh_repos()
    assert (await users.get(other.id)).email == "otro@test.com"


async def test_update_missing_user(test_db):
    with pytest.raises(UserNotFoundError):
        await SqlUserRepository(test_db).update(999, {"name": "Nadie"})


async def test_update_missing_budget(fresh_repos):
    _, budgets, _ = fresh_repos()
    with pytest.raises(ResourceNotFoundError) as exc:
        await budgets.update(999, {"name": "Nada", "amount": Decimal("1")})
    assert exc.value.message == "Presupuesto no encontrado"


async def test_update_missing_expense(fresh_repos):
    _, _, expenses = fresh_repos()
    with pytest.raises(ResourceNotFoundError) as exc:
        await expenses.update(999, {"name": "Nada", "amount": Decimal("1")})
    assert exc.value.message == "Gasto no encontrado"

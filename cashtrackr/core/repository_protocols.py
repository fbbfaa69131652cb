"""Boundary Protocols — contracts between core/services and the persistence shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Repositories speak in plain records (core/domain_types.py), never ORM instances
    - Capability set per entity: find-by-id, find-by-predicate, create, update, delete
    - Deleting a budget deletes its expenses
    - UserRepository.create/update raise EmailTakenError on a duplicate email;
      every update() raises the not-found error for a missing row

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, callers await them
"""

from typing import Protocol

from cashtrackr.core.domain_types import (
    BudgetId, BudgetRecord, ExpenseId, ExpenseRecord, UserId, UserRecord,
)


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def get(self, user_id: UserId) -> UserRecord | None: ...
    async def find_by_email(self, email: str) -> UserRecord | None: ...
    async def find_by_token(self, token: str) -> UserRecord | None: ...
    async def create(self, fields: dict) -> UserRecord: ...
    async def update(self, user_id: UserId, fields: dict) -> None: ...


class BudgetRepository(Protocol):
    """Contract for budget persistence — implemented by shell."""
    async def get(self, budget_id: BudgetId) -> BudgetRecord | None: ...
    async def get_with_expenses(self, budget_id: BudgetId) -> BudgetRecord | None: ...
    async def list_for_owner(self, user_id: UserId) -> list[BudgetRecord]: ...
    async def create(self, fields: dict) -> BudgetRecord: ...
    async def update(self, budget_id: BudgetId, fields: dict) -> BudgetRecord: ...
    async def delete(self, budget_id: BudgetId) -> None: ...


class ExpenseRepository(Protocol):
    """Contract for expense persistence — implemented by shell."""
    async def get(self, expense_id: ExpenseId) -> ExpenseRecord | None: ...
    async def create(self, fields: dict) -> ExpenseRecord: ...
    async def update(self, expense_id: ExpenseId, fields: dict) -> ExpenseRecord: ...
    async def delete(self, expense_id: ExpenseId) -> None: ...

"""SQLAlchemy Repositories — persistence shell behind core/repository_protocols.py.

Invariants:
    - Every public method returns plain records, never ORM instances
    - Every mutation commits before returning (one row, one commit)
    - BudgetRepository.delete removes the budget's expenses in the same commit
    - A duplicate email raises EmailTakenError (409) even when two registrations
      race past the service's find_by_email check
    - update() of a missing row raises the not-found error instead of succeeding

Design Decisions:
    - Expenses deleted with an explicit DELETE before the budget: cascade holds on
      SQLite test databases where foreign-key enforcement is off
    - get() does not load children; get_with_expenses() does (selectin relationship)
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cashtrackr.core.domain_types import (
    BudgetId, BudgetRecord, ExpenseId, ExpenseRecord, UserId, UserRecord,
)
from cashtrackr.core.errors import (
    EMAIL_REGISTERED, EMAIL_USED_BY_OTHER, EmailTakenError, ResourceNotFoundError,
    UserNotFoundError,
)
from cashtrackr.models.budget import Budget
from cashtrackr.models.expense import Expense
from cashtrackr.models.user import User


def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        password=row.password,
        confirmed=row.confirmed,
        token=row.token,
    )


def _expense_record(row: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=ExpenseId(row.id),
        name=row.name,
        amount=row.amount,
        budget_id=BudgetId(row.budget_id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _budget_record(row: Budget, with_expenses: bool = False) -> BudgetRecord:
    expenses = tuple(_expense_record(e) for e in row.expenses) if with_expenses else ()
    return BudgetRecord(
        id=BudgetId(row.id),
        name=row.name,
        amount=row.amount,
        user_id=UserId(row.user_id),
        created_at=row.created_at,
        updated_at=row.updated_at,
        expenses=expenses,
    )


class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, user_id: UserId) -> UserRecord | None:
        row = await self._db.get(User, user_id)
        return _user_record(row) if row else None

    async def find_by_email(self, email: str) -> UserRecord | None:
        return await self._find_one(User.email == email)

    async def find_by_token(self, token: str) -> UserRecord | None:
        return await self._find_one(User.token == token)

    async def create(self, fields: dict) -> UserRecord:
        row = User(**fields)
        self._db.add(row)
        await self._commit_unique_email(EMAIL_REGISTERED)
        await self._db.refresh(row)
        return _user_record(row)

    async def update(self, user_id: UserId, fields: dict) -> None:
        row = await self._db.get(User, user_id)
        if row is None:
            raise UserNotFoundError()
        for name, value in fields.items():
            setattr(row, name, value)
        await self._commit_unique_email(EMAIL_USED_BY_OTHER)

    async def _commit_unique_email(self, message: str) -> None:
        # email is the only unique column on users
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise EmailTakenError(message)

    async def _find_one(self, predicate) -> UserRecord | None:
        result = await self._db.execute(select(User).where(predicate).limit(1))
        row = result.scalar_one_or_none()
        return _user_record(row) if row else None


class SqlBudgetRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, budget_id: BudgetId) -> BudgetRecord | None:
        row = await self._db.get(Budget, budget_id)
        return _budget_record(row) if row else None

    async def get_with_expenses(self, budget_id: BudgetId) -> BudgetRecord | None:
        result = await self._db.execute(
            select(Budget).where(Budget.id == budget_id)
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        return _budget_record(row, with_expenses=True) if row else None

    async def list_for_owner(self, user_id: UserId) -> list[BudgetRecord]:
        result = await self._db.execute(
            select(Budget)
            .where(Budget.user_id == user_id)
            .order_by(Budget.created_at.desc(), Budget.id.desc()),
        )
        return [_budget_record(row) for row in result.scalars().all()]

    async def create(self, fields: dict) -> BudgetRecord:
        row = Budget(**fields)
        self._db.add(row)
        await self._db.commit()
        await self._db.refresh(row)
        return _budget_record(row)

    async def update(self, budget_id: BudgetId, fields: dict) -> BudgetRecord:
        row = await self._db.get(Budget, budget_id)
        if row is None:
            raise ResourceNotFoundError("Presupuesto no encontrado")
        for name, value in fields.items():
            setattr(row, name, value)
        await self._db.commit()
        await self._db.refresh(row)
        return _budget_record(row)

    async def delete(self, budget_id: BudgetId) -> None:
        await self._db.execute(delete(Expense).where(Expense.budget_id == budget_id))
        await self._db.execute(delete(Budget).where(Budget.id == budget_id))
        await self._db.commit()


class SqlExpenseRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, expense_id: ExpenseId) -> ExpenseRecord | None:
        row = await self._db.get(Expense, expense_id)
        return _expense_record(row) if row else None

    async def create(self, fields: dict) -> ExpenseRecord:
        row = Expense(**fields)
        self._db.add(row)
        await self._db.commit()
        await self._db.refresh(row)
        return _expense_record(row)

    async def update(self, expense_id: ExpenseId, fields: dict) -> ExpenseRecord:
        row = await self._db.get(Expense, expense_id)
        if row is None:
            raise ResourceNotFoundError("Gasto no encontrado")
        for name, value in fields.items():
            setattr(row, name, value)
        await self._db.commit()
        await self._db.refresh(row)
        return _expense_record(row)

    async def delete(self, expense_id: ExpenseId) -> None:
        await self._db.execute(delete(Expense).where(Expense.id == expense_id))
        await self._db.commit()

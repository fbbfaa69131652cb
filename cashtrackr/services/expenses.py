"""Expense Service — CRUD over expenses of an already-authorized budget.

Invariants:
    - create() assigns budget_id from the resolved budget, never from input
    - update() never touches budget_id
"""

import logging

from cashtrackr.core.domain_types import BudgetRecord, ExpenseRecord
from cashtrackr.core.repository_protocols import ExpenseRepository
from cashtrackr.schemas.expense import ExpenseInput

logger = logging.getLogger(__name__)


class ExpenseService:

    def __init__(self, expenses: ExpenseRepository):
        self.expenses = expenses

    async def create(self, budget: BudgetRecord, data: ExpenseInput) -> ExpenseRecord:
        expense = await self.expenses.create(
            {"name": data.name, "amount": data.amount, "budget_id": budget.id},
        )
        logger.info(
            "Expense created",
            extra={"budget_id": budget.id, "expense_id": expense.id},
        )
        return expense

    async def update(self, expense: ExpenseRecord, data: ExpenseInput) -> ExpenseRecord:
        return await self.expenses.update(
            expense.id, {"name": data.name, "amount": data.amount},
        )

    async def delete(self, expense: ExpenseRecord) -> None:
        await self.expenses.delete(expense.id)

"""Budget Service — CRUD over budgets already authorized by the request pipeline.

Invariants:
    - create() assigns user_id from the authenticated identity, never from input
    - update() never touches user_id
    - delete() removes the budget and all its expenses
    - No method re-checks ownership: callers pass budgets that passed the guards
"""

import logging

from cashtrackr.core.domain_types import AuthenticatedUser, BudgetRecord
from cashtrackr.core.repository_protocols import BudgetRepository
from cashtrackr.schemas.budget import BudgetInput

logger = logging.getLogger(__name__)


class BudgetService:

    def __init__(self, budgets: BudgetRepository):
        self.budgets = budgets

    async def list_for_owner(self, user: AuthenticatedUser) -> list[BudgetRecord]:
        return await self.budgets.list_for_owner(user.id)

    async def create(self, user: AuthenticatedUser, data: BudgetInput) -> BudgetRecord:
        budget = await self.budgets.create(
            {"name": data.name, "amount": data.amount, "user_id": user.id},
        )
        logger.info("Budget created", extra={"user_id": user.id, "budget_id": budget.id})
        return budget

    async def get_with_expenses(self, budget: BudgetRecord) -> BudgetRecord:
        return await self.budgets.get_with_expenses(budget.id) or budget

    async def update(self, budget: BudgetRecord, data: BudgetInput) -> BudgetRecord:
        return await self.budgets.update(
            budget.id, {"name": data.name, "amount": data.amount},
        )

    async def delete(self, budget: BudgetRecord) -> None:
        await self.budgets.delete(budget.id)
        logger.info(
            "Budget deleted", extra={"user_id": budget.user_id, "budget_id": budget.id},
        )

"""Budget Routes — owner-scoped budget CRUD.

Invariants:
    - Every route authenticates; /{budget_id} routes also pass load_budget
      (shape → existence → ownership) before the handler runs
    - Input is validated after the budget context resolved
"""

import logging

from fastapi import APIRouter, Depends, status

from cashtrackr.api.dependencies import (
    BudgetContext, budget_input, get_budget_service, get_current_user, load_budget,
)
from cashtrackr.core.domain_types import AuthenticatedUser
from cashtrackr.schemas.budget import (
    BudgetDetailResponse, BudgetInput, BudgetResponse,
)
from cashtrackr.services.budgets import BudgetService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@router.get("", response_model=list[BudgetResponse])
async def list_budgets(
    user: AuthenticatedUser = Depends(get_current_user),
    budgets: BudgetService = Depends(get_budget_service),
):
    return await budgets.list_for_owner(user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_budget(
    user: AuthenticatedUser = Depends(get_current_user),
    data: BudgetInput = Depends(budget_input),
    budgets: BudgetService = Depends(get_budget_service),
):
    await budgets.create(user, data)
    return "Presupuesto creado correctamente"


@router.get("/{budget_id}", response_model=BudgetDetailResponse)
async def get_budget(
    ctx: BudgetContext = Depends(load_budget),
    budgets: BudgetService = Depends(get_budget_service),
):
    return await budgets.get_with_expenses(ctx.budget)


@router.put("/{budget_id}")
async def update_budget(
    ctx: BudgetContext = Depends(load_budget),
    data: BudgetInput = Depends(budget_input),
    budgets: BudgetService = Depends(get_budget_service),
):
    await budgets.update(ctx.budget, data)
    return "Presupuesto actualizado correctamente"


@router.delete("/{budget_id}")
async def delete_budget(
    ctx: BudgetContext = Depends(load_budget),
    budgets: BudgetService = Depends(get_budget_service),
):
    await budgets.delete(ctx.budget)
    return "Presupuesto eliminado correctamente"

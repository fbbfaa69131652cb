"""Expense Routes — expenses nested under an owned budget.

Invariants:
    - load_budget (ownership) always runs before load_expense (linkage)
    - An expense is only reachable through the budget it belongs to
"""

import logging

from fastapi import APIRouter, Depends, status

from cashtrackr.api.dependencies import (
    BudgetContext, ExpenseContext, expense_input, get_expense_service,
    load_budget, load_expense,
)
from cashtrackr.schemas.expense import ExpenseInput, ExpenseResponse
from cashtrackr.services.expenses import ExpenseService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/budgets/{budget_id}/expenses", tags=["expenses"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(
    ctx: BudgetContext = Depends(load_budget),
    data: ExpenseInput = Depends(expense_input),
    expenses: ExpenseService = Depends(get_expense_service),
):
    await expenses.create(ctx.budget, data)
    return "Gasto agregado correctamente"


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(ctx: ExpenseContext = Depends(load_expense)):
    return ctx.expense


@router.put("/{expense_id}")
async def update_expense(
    ctx: ExpenseContext = Depends(load_expense),
    data: ExpenseInput = Depends(expense_input),
    expenses: ExpenseService = Depends(get_expense_service),
):
    await expenses.update(ctx.expense, data)
    return "Gasto actualizado correctamente"


@router.delete("/{expense_id}")
async def delete_expense(
    ctx: ExpenseContext = Depends(load_expense),
    expenses: ExpenseService = Depends(get_expense_service),
):
    await expenses.delete(ctx.expense)
    return "Gasto eliminado correctamente"

"""Access Guards — pure checks of the resource pipeline (shape, ownership, linkage).

Invariants:
    - parse_resource_id never reaches a loader with a non-positive or non-integer id
    - Budget access requires budget.user_id == identity.id (ownership)
    - Expense access requires expense.budget_id == budget.id, where the budget has
      already passed the ownership guard (linkage; ownership is not re-derived)

Design Decisions:
    - Guards raise typed errors instead of returning bools: the pipeline
      short-circuits on the first failing stage without branching at each call site
    - Ownership answers 401 and linkage answers 403 (see core/errors.py)
"""

from cashtrackr.core.domain_types import (
    AuthenticatedUser, BudgetRecord, ExpenseRecord,
)
from cashtrackr.core.errors import LinkageError, OwnershipError, ErrorContext
from cashtrackr.core.input_rules import FieldChain, require_valid

BUDGET_ID_PARAM = "budgetId"
EXPENSE_ID_PARAM = "expenseId"

_ID_MESSAGES = {
    BUDGET_ID_PARAM: "ID no valido",
    EXPENSE_ID_PARAM: "Id no valido",
}


def parse_resource_id(raw: str, param: str) -> int:
    """Validate a path id as a positive integer; one error at most."""
    message = _ID_MESSAGES.get(param, "ID no valido")
    chain = (
        FieldChain(param, bail=True)
        .integer(message)
        .custom(lambda value: int(value) > 0, message, "positive")
    )
    require_valid({param: raw}, chain)
    return int(raw)


def ensure_budget_owner(budget: BudgetRecord, user: AuthenticatedUser) -> None:
    if budget.user_id != user.id:
        raise OwnershipError(ErrorContext(user_id=user.id, resource_id=budget.id))


def ensure_expense_linkage(expense: ExpenseRecord, budget: BudgetRecord) -> None:
    if expense.budget_id != budget.id:
        raise LinkageError(ErrorContext(user_id=budget.user_id, resource_id=expense.id))

"""Budget Schemas — field rules, typed input and responses.

Invariants:
    - name not empty; amount not empty, numeric and > 0
    - every failing rule is reported (empty body → 4 errors)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cashtrackr.core.input_rules import FieldChain, RuledInput
from cashtrackr.schemas.amounts import Amount, amount_chain
from cashtrackr.schemas.expense import ExpenseResponse

BUDGET_RULES = (
    FieldChain("name")
    .not_empty("El nombre del presupuesto no puede ir vacio")
    .length("El nombre del presupuesto es muy largo", max_length=100),
    amount_chain(
        "La cantidad del presupuesto no puede ir vacia",
        "El presupuesto debe ser mayor a cero",
    ),
)


class BudgetInput(RuledInput):
    rules = BUDGET_RULES

    name: str = Field(min_length=1, max_length=100)
    amount: Amount


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    amount: Decimal
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BudgetDetailResponse(BudgetResponse):
    expenses: list[ExpenseResponse] = []

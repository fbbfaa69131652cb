"""Expense Schemas — field rules, typed input and responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cashtrackr.core.input_rules import FieldChain, RuledInput
from cashtrackr.schemas.amounts import Amount, amount_chain

EXPENSE_RULES = (
    FieldChain("name")
    .not_empty("El nombre del gasto no puede ir vacio")
    .length("El nombre del gasto es muy largo", max_length=100),
    amount_chain(
        "La cantidad del gasto no puede ir vacia", "El gasto debe ser mayor a cero",
    ),
)


class ExpenseInput(RuledInput):
    rules = EXPENSE_RULES

    name: str = Field(min_length=1, max_length=100)
    amount: Amount


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    amount: Decimal
    budget_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

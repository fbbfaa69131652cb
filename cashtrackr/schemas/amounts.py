"""Money Amounts — the rule chain and pydantic type shared by budgets and expenses.

Invariants:
    - Amounts fit Numeric(10, 2): at most 2 decimal places, below 10^8
    - An amount that passes the rules is stored and read back unchanged
"""

from decimal import Decimal
from typing import Annotated

from pydantic import Field

from cashtrackr.core.input_rules import FieldChain

AMOUNT_DECIMAL_PLACES = 2
AMOUNT_LIMIT = Decimal(10) ** 8

AMOUNT_INVALID = "Cantidad no valida"
AMOUNT_TOO_PRECISE = "La cantidad solo puede tener 2 decimales"
AMOUNT_TOO_LARGE = "La cantidad es demasiado grande"

Amount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


def amount_chain(empty_message: str, positive_message: str) -> FieldChain:
    return (
        FieldChain("amount")
        .not_empty(empty_message)
        .numeric(AMOUNT_INVALID)
        .positive(positive_message)
        .decimal_places(AMOUNT_TOO_PRECISE, AMOUNT_DECIMAL_PLACES)
        .below(AMOUNT_TOO_LARGE, AMOUNT_LIMIT)
    )

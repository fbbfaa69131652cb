"""Domain Types — identity types and plain records passed between core and shell.

Invariants:
    - UserId, BudgetId, ExpenseId wrap ints — positive database identifiers
    - Records are frozen: a handler never mutates a loaded entity in place,
      it asks a repository to persist field changes
    - Budget.user_id and Expense.budget_id never change after creation

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Plain dataclasses instead of ORM instances: routes and services never touch
      SQLAlchemy state (lazy loads, expiry) directly
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
BudgetId = NewType("BudgetId", int)
ExpenseId = NewType("ExpenseId", int)


# ─── Enums ───────────────────────────────────────────────────────

class AccountState(str, Enum):
    """User lifecycle states derived from (confirmed, token)."""
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"
    RESET_PENDING = "reset_pending"


class TokenPurpose(str, Enum):
    """Why an opaque token was issued."""
    CONFIRMATION = "confirmation"
    PASSWORD_RESET = "password_reset"


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class UserRecord:
    id: UserId
    name: str
    email: str
    password: str
    confirmed: bool = False
    token: str | None = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """Bounded projection of a User attached to an authenticated request."""
    id: UserId
    name: str
    email: str


@dataclass(frozen=True)
class ExpenseRecord:
    id: ExpenseId
    name: str
    amount: Decimal
    budget_id: BudgetId
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class BudgetRecord:
    id: BudgetId
    name: str
    amount: Decimal
    user_id: UserId
    created_at: datetime | None = None
    updated_at: datetime | None = None
    expenses: tuple[ExpenseRecord, ...] = field(default=())


@dataclass(frozen=True)
class TokenEvent:
    """Emitted to the token observer whenever an opaque token is issued."""
    user_id: UserId
    email: str
    token: str
    purpose: TokenPurpose

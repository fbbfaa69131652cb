"""ORM Models — SQLAlchemy declarative models for users, budgets and expenses.

Invariants:
    - All models inherit from Base (db/base.py)
    - User owns Budgets, Budget owns Expenses; both links cascade on delete

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from cashtrackr.models.user import User  # noqa: F401
from cashtrackr.models.budget import Budget  # noqa: F401
from cashtrackr.models.expense import Expense  # noqa: F401

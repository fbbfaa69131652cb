"""CashTrackr — budgeting API with token-gated accounts and owner-scoped budgets.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

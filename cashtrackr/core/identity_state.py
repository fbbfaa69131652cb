"""Identity State — pure transitions of the User lifecycle keyed by opaque tokens.

States (derived from confirmed + token):
    Unconfirmed   (confirmed=False, token set)
    Confirmed     (confirmed=True,  token None)
    ResetPending  (confirmed=True,  token set)

Invariants:
    - A user holds at most one outstanding token: confirmation OR reset
    - confirm() and complete_reset() always clear the token (single use)
    - Login requires Confirmed or ResetPending; password correctness is irrelevant
      until the account is confirmed

Design Decisions:
    - Transitions return the field changes to persist, never mutate records:
      the service applies them through the repository in a single update
"""

from cashtrackr.core.domain_types import AccountState, UserRecord
from cashtrackr.core.errors import AccountNotConfirmedError, ErrorContext


def account_state(user: UserRecord) -> AccountState:
    if not user.confirmed:
        return AccountState.UNCONFIRMED
    if user.token:
        return AccountState.RESET_PENDING
    return AccountState.CONFIRMED


def new_account(name: str, email: str, password_hash: str, token: str) -> dict:
    """Fields of a freshly registered, unconfirmed user."""
    return {
        "name": name,
        "email": email,
        "password": password_hash,
        "token": token,
        "confirmed": False,
    }


def confirm(user: UserRecord) -> dict:
    return {"confirmed": True, "token": None}


def begin_reset(user: UserRecord, token: str) -> dict:
    return {"token": token}


def complete_reset(user: UserRecord, password_hash: str) -> dict:
    return {"password": password_hash, "token": None}


def ensure_can_login(user: UserRecord) -> None:
    if account_state(user) is AccountState.UNCONFIRMED:
        raise AccountNotConfirmedError(ErrorContext(user_id=user.id))

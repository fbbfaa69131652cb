"""Request Pipeline — authentication and resource loading as FastAPI dependencies.

Stages (each stage receives the context built by the previous one):
    1. get_current_user   Authorization header → AuthenticatedUser
    2. load_budget        budget_id → shape check → load → ownership → BudgetContext
    3. load_expense       expense_id → shape check → load → linkage → ExpenseContext
    4. *_input            raw JSON body → every field rule → typed input model

Invariants:
    - No identity is attached without a valid session token (no anonymous user)
    - load_budget depends on get_current_user, load_expense on load_budget:
      a later stage cannot run unless every earlier one succeeded
    - Body validation runs only after the resource context resolved (routes declare
      the context parameter before the input parameter)
    - Context values are frozen dataclasses; nothing is appended to the request object

Design Decisions:
    - Path ids received as raw strings: shape errors are reported with the same
      rule engine and envelope as body errors
    - Services built per request from the request's DB session and the
      Settings bound to the app (app.state.settings)
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Body, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cashtrackr.config import Settings
from cashtrackr.core.access_guards import (
    BUDGET_ID_PARAM, EXPENSE_ID_PARAM,
    ensure_budget_owner, ensure_expense_linkage, parse_resource_id,
)
from cashtrackr.core.domain_types import (
    AuthenticatedUser, BudgetId, BudgetRecord, ExpenseId, ExpenseRecord,
)
from cashtrackr.core.errors import (
    MalformedCredentialError, NotAuthenticatedError, ResourceNotFoundError,
)
from cashtrackr.core.input_rules import build_input
from cashtrackr.infrastructure.credentials import SessionTokens
from cashtrackr.infrastructure.database import get_db
from cashtrackr.infrastructure.mailer import Mailer, build_mailer
from cashtrackr.infrastructure.repositories import (
    SqlBudgetRepository, SqlExpenseRepository, SqlUserRepository,
)
from cashtrackr.schemas.budget import BudgetInput
from cashtrackr.schemas.expense import ExpenseInput
from cashtrackr.services.budgets import BudgetService
from cashtrackr.services.expenses import ExpenseService
from cashtrackr.services.identity import IdentityService, TokenObserver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetContext:
    user: AuthenticatedUser
    budget: BudgetRecord


@dataclass(frozen=True)
class ExpenseContext:
    user: AuthenticatedUser
    budget: BudgetRecord
    expense: ExpenseRecord


# ─── Collaborators ───────────────────────────────────────────────

def get_app_settings(request: Request) -> Settings:
    """Settings bound to the running app by create_app()."""
    return request.app.state.settings


def get_mailer(settings: Settings = Depends(get_app_settings)) -> Mailer:
    return build_mailer(settings)


def get_session_tokens(settings: Settings = Depends(get_app_settings)) -> SessionTokens:
    return SessionTokens(settings.jwt_secret, settings.session_token_ttl_days)


def get_token_observer() -> TokenObserver | None:
    """No observer in production; tests override this dependency."""
    return None


async def get_identity_service(
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    session_tokens: SessionTokens = Depends(get_session_tokens),
    token_observer: TokenObserver | None = Depends(get_token_observer),
    settings: Settings = Depends(get_app_settings),
) -> IdentityService:
    return IdentityService(
        SqlUserRepository(db), mailer, session_tokens,
        settings.frontend_url, token_observer,
    )


def get_budget_service(db: AsyncSession = Depends(get_db)) -> BudgetService:
    return BudgetService(SqlBudgetRepository(db))


def get_expense_service(db: AsyncSession = Depends(get_db)) -> ExpenseService:
    return ExpenseService(SqlExpenseRepository(db))


async def json_body(payload: Any = Body(None)) -> dict:
    """Raw JSON body; anything that is not an object counts as empty."""
    return payload if isinstance(payload, dict) else {}


# ─── Stage 1: authentication ─────────────────────────────────────

async def get_current_user(
    authorization: str | None = Header(None),
    identity: IdentityService = Depends(get_identity_service),
) -> AuthenticatedUser:
    if not authorization:
        raise NotAuthenticatedError()
    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise MalformedCredentialError()
    return await identity.authenticate(token)


# ─── Stage 2: budget ─────────────────────────────────────────────

async def load_budget(
    budget_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> BudgetContext:
    parsed = BudgetId(parse_resource_id(budget_id, BUDGET_ID_PARAM))
    budget = await SqlBudgetRepository(db).get(parsed)
    if budget is None:
        raise ResourceNotFoundError("Presupuesto no encontrado")
    ensure_budget_owner(budget, user)
    return BudgetContext(user=user, budget=budget)


# ─── Stage 3: expense ────────────────────────────────────────────

async def load_expense(
    expense_id: str,
    budget_ctx: BudgetContext = Depends(load_budget),
    db: AsyncSession = Depends(get_db),
) -> ExpenseContext:
    parsed = ExpenseId(parse_resource_id(expense_id, EXPENSE_ID_PARAM))
    expense = await SqlExpenseRepository(db).get(parsed)
    if expense is None:
        raise ResourceNotFoundError("Gasto no encontrado")
    ensure_expense_linkage(expense, budget_ctx.budget)
    return ExpenseContext(
        user=budget_ctx.user, budget=budget_ctx.budget, expense=expense,
    )


# ─── Stage 4: body ───────────────────────────────────────────────

async def budget_input(payload: dict = Depends(json_body)) -> BudgetInput:
    return build_input(BudgetInput, payload)


async def expense_input(payload: dict = Depends(json_body)) -> ExpenseInput:
    return build_input(ExpenseInput, payload)

"""Identity Service — registration, confirmation, login and password flows.

Invariants:
    - Registration never creates a second user for an email (409 instead)
    - Opaque tokens are persisted before the email carrying them is sent
    - Confirm and reset consume the token; validate_reset_token does not
    - Login checks existence, then confirmation, then password, in that order
    - Email delivery failure surfaces as EmailDeliveryError (500), never as success

Design Decisions:
    - Pure transitions in core/identity_state.py, IO orchestrated here
      (impureim sandwich: load → decide → persist → notify)
    - token_observer replaces a process-wide "last issued token" hook:
      tests and tooling subscribe per service instance
"""

import logging
from typing import Callable

from cashtrackr.core import identity_state
from cashtrackr.core.domain_types import (
    AuthenticatedUser, TokenEvent, TokenPurpose, UserId, UserRecord,
)
from cashtrackr.core.email_templates import (
    render_confirmation, render_password_reset,
)
from cashtrackr.core.errors import (
    EMAIL_USED_BY_OTHER, EmailTakenError, ErrorContext, InvalidSessionTokenError,
    InvalidTokenError, UnknownTokenError, UserNotFoundError, WrongPasswordError,
)
from cashtrackr.core.repository_protocols import UserRepository
from cashtrackr.infrastructure import credentials
from cashtrackr.infrastructure.credentials import SessionTokens
from cashtrackr.infrastructure.mailer import EmailMessage, Mailer

logger = logging.getLogger(__name__)

TokenObserver = Callable[[TokenEvent], None]

CURRENT_PASSWORD_WRONG = "El password actual es incorrecto"


class IdentityService:
    """User lifecycle transitions keyed by opaque and session tokens."""

    def __init__(
        self,
        users: UserRepository,
        mailer: Mailer,
        session_tokens: SessionTokens,
        frontend_url: str,
        token_observer: TokenObserver | None = None,
    ):
        self.users = users
        self.mailer = mailer
        self.session_tokens = session_tokens
        self.frontend_url = frontend_url
        self.token_observer = token_observer

    # ─── Unauthenticated flows ───────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> UserRecord:
        if await self.users.find_by_email(email):
            raise EmailTakenError()
        token = credentials.generate_token()
        user = await self.users.create(identity_state.new_account(
            name, email, credentials.hash_password(password), token,
        ))
        logger.info("Account created", extra={"user_id": user.id})
        self._notify(user, token, TokenPurpose.CONFIRMATION)
        email_body = render_confirmation(user.name, token, self.frontend_url)
        await self.mailer.send(EmailMessage(user.email, email_body.subject, email_body.html))
        return user

    async def confirm_account(self, token: str) -> None:
        user = await self.users.find_by_token(token)
        if user is None:
            raise InvalidTokenError()
        await self.users.update(user.id, identity_state.confirm(user))
        logger.info("Account confirmed", extra={"user_id": user.id})

    async def login(self, email: str, password: str) -> str:
        user = await self.users.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        identity_state.ensure_can_login(user)
        if not credentials.check_password(password, user.password):
            raise WrongPasswordError(context=ErrorContext(user_id=user.id))
        return self.session_tokens.issue(user.id)

    async def forgot_password(self, email: str) -> None:
        user = await self.users.find_by_email(email)
        if user is None:
            raise UserNotFoundError()
        token = credentials.generate_token()
        await self.users.update(user.id, identity_state.begin_reset(user, token))
        self._notify(user, token, TokenPurpose.PASSWORD_RESET)
        email_body = render_password_reset(user.name, token, self.frontend_url)
        await self.mailer.send(EmailMessage(user.email, email_body.subject, email_body.html))

    async def validate_reset_token(self, token: str) -> None:
        if await self.users.find_by_token(token) is None:
            raise UnknownTokenError()

    async def reset_password(self, token: str, password: str) -> None:
        user = await self.users.find_by_token(token)
        if user is None:
            raise UnknownTokenError()
        await self.users.update(
            user.id,
            identity_state.complete_reset(user, credentials.hash_password(password)),
        )
        logger.info("Password reset", extra={"user_id": user.id})

    # ─── Authenticated flows ─────────────────────────────────────

    async def authenticate(self, session_token: str) -> AuthenticatedUser:
        """Resolve a session token to the bounded user projection."""
        user_id = self.session_tokens.verify(session_token)
        user = await self.users.get(user_id)
        if user is None:
            # signed for an account that no longer exists
            raise InvalidSessionTokenError(ErrorContext(user_id=user_id))
        return AuthenticatedUser(id=user.id, name=user.name, email=user.email)

    async def change_password(
        self, user_id: UserId, current_password: str, new_password: str,
    ) -> None:
        user = await self._require_user(user_id)
        if not credentials.check_password(current_password, user.password):
            raise WrongPasswordError(CURRENT_PASSWORD_WRONG, ErrorContext(user_id=user_id))
        await self.users.update(
            user_id, {"password": credentials.hash_password(new_password)},
        )

    async def check_password(self, user_id: UserId, password: str) -> None:
        user = await self._require_user(user_id)
        if not credentials.check_password(password, user.password):
            raise WrongPasswordError(CURRENT_PASSWORD_WRONG, ErrorContext(user_id=user_id))

    async def update_profile(self, user_id: UserId, name: str, email: str) -> None:
        existing = await self.users.find_by_email(email)
        if existing and existing.id != user_id:
            raise EmailTakenError(EMAIL_USED_BY_OTHER, ErrorContext(user_id=user_id))
        await self.users.update(user_id, {"name": name, "email": email})

    # ─── Helpers ─────────────────────────────────────────────────

    async def _require_user(self, user_id: UserId) -> UserRecord:
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFoundError(ErrorContext(user_id=user_id))
        return user

    def _notify(self, user: UserRecord, token: str, purpose: TokenPurpose) -> None:
        if self.token_observer is not None:
            self.token_observer(TokenEvent(user.id, user.email, token, purpose))

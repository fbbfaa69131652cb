"""Credentials — password hashing, opaque tokens and signed session tokens.

Invariants:
    - Passwords are stored only as salted bcrypt hashes
    - Opaque tokens are 6 numeric characters from a CSPRNG
    - Session tokens are HS256 JWTs carrying {"id": user_id, "exp": ...}
    - verify() never returns an id for an expired, tampered or malformed token

Design Decisions:
    - bcrypt directly rather than a hashing framework: one scheme, no migration story needed
    - No uniqueness check on opaque tokens (see DESIGN.md, open question)
    - SessionTokens takes secret and ttl as constructor args: no process-wide config reads
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from cashtrackr.core.domain_types import UserId
from cashtrackr.core.errors import InvalidSessionTokenError

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 6
JWT_ALGORITHM = "HS256"


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def generate_token() -> str:
    """Six-digit opaque token used for account confirmation and password reset."""
    low = 10 ** (TOKEN_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


class SessionTokens:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(self, secret: str, ttl_days: int = 30):
        self._secret = secret
        self._ttl = timedelta(days=ttl_days)

    def issue(self, user_id: UserId) -> str:
        expires = datetime.now(timezone.utc) + self._ttl
        return jwt.encode(
            {"id": user_id, "exp": expires}, self._secret, algorithm=JWT_ALGORITHM,
        )

    def verify(self, token: str) -> UserId:
        try:
            payload = jwt.decode(
                token, self._secret, algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Session token rejected: {type(e).__name__}")
            raise InvalidSessionTokenError()
        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidSessionTokenError()
        return UserId(user_id)

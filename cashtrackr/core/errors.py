"""Error Hierarchy — typed, categorized exceptions for all CashTrackr failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope shared by every error path
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CashTrackrError base: FastAPI global handler catches all
    - Ownership failures answer 401 while linkage failures answer 403; the split is
      kept as clients already depend on it
    - An invalid session token answers 500, not 401 (see DESIGN.md, open question)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


GENERIC_ERROR_MESSAGE = "Hubo un error"
EMAIL_REGISTERED = "El usuario ya esta registrado"
EMAIL_USED_BY_OTHER = "Ese email ya esta registrado por otro usuario"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    resource_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CashTrackrError(Exception):
    """Base exception for all CashTrackr errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Validation (400) ────────────────────────────────────────────

@dataclass(frozen=True)
class FieldError:
    """One failed rule on one input field."""
    field: str
    message: str
    type: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message, "type": self.type}


class InputValidationError(CashTrackrError):
    """Request input failed one or more field rules. Carries every failure."""
    def __init__(self, details: list[FieldError], context: ErrorContext | None = None):
        super().__init__(
            "Datos de entrada no validos", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.details = list(details)

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [d.to_dict() for d in self.details]
        return response


# ─── Authentication (401 / 403) ──────────────────────────────────

class NotAuthenticatedError(CashTrackrError):
    """No bearer credential presented."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No autorizado", "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class MalformedCredentialError(CashTrackrError):
    """Authorization header present but carries no scheme-separated token."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Token no valido", "INVALID_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidTokenError(CashTrackrError):
    """Opaque token does not match any account awaiting confirmation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Token no valido", "INVALID_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class WrongPasswordError(CashTrackrError):
    """Password check failed."""
    def __init__(
        self, message: str = "Contraseña incorrecta", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class AccountNotConfirmedError(CashTrackrError):
    """Login attempted before the account was confirmed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cuenta no ha sido confirmada", "ACCOUNT_NOT_CONFIRMED",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.WARNING, context, 403,
        )


class OwnershipError(CashTrackrError):
    """Authenticated identity does not own the requested budget."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Accion no valida", "ACCESS_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class LinkageError(CashTrackrError):
    """Expense does not belong to the already-authorized budget."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Accion no valida", "ACCESS_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Not found / conflict (404 / 409) ────────────────────────────

class ResourceNotFoundError(CashTrackrError):
    """Requested resource does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("El usuario no existe", context)


class UnknownTokenError(ResourceNotFoundError):
    """Password-reset token does not match any account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Token no valido", context)


class EmailTakenError(CashTrackrError):
    """Email already registered (by anyone, or by another user on profile update)."""
    def __init__(
        self, message: str = EMAIL_REGISTERED,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure (500-level) ──────────────────────────────────

class InvalidSessionTokenError(CashTrackrError):
    """Session token failed signature, payload or expiry checks."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Token no valido", "INVALID_SESSION_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context, 500,
        )


class EmailDeliveryError(CashTrackrError):
    """Outbound email could not be sent."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            GENERIC_ERROR_MESSAGE, "EMAIL_DELIVERY_FAILED",
            ErrorCategory.EXTERNAL_SERVICE, ErrorSeverity.CRITICAL, context, 500,
        )
        self.reason = reason


class DatabaseError(CashTrackrError):
    """Database operation failed. The client only sees the generic message."""
    def __init__(self, reason: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            GENERIC_ERROR_MESSAGE,
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
        self.reason = reason

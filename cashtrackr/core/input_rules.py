"""Input Rules — accumulating field rule chains for request bodies and path params.

Invariants:
    - Every rule of every field runs; failures are collected, never short-circuited
      (an empty budget body yields 4 errors: 1 for name, 3 for amount)
    - A chain marked bail=True stops at its own first failure (id params)
    - Rules are pure predicates over the raw JSON value, no IO
    - Range and precision rules pass vacuously on non-numeric values: the numeric
      rule already reports those, so the error count stays stable
    - RuledInput models run their rule chains before any pydantic field parsing

Design Decisions:
    - Raw JSON dict in, list[FieldError] out: the error count is part of the
      client contract, so field rules cannot stop at the first failure
      the way pydantic field validators do
    - Chains attach to pydantic models through a mode="before" model validator;
      InputValidationError is not a ValueError, so pydantic lets it propagate
      with every collected failure instead of folding it into one line error
    - Email syntax delegated to email-validator (same library behind pydantic EmailStr)
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ClassVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from cashtrackr.core.errors import FieldError, InputValidationError

Predicate = Callable[[Any], bool]

_ASCII_INT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Rule:
    check: Predicate
    message: str
    type: str


@dataclass
class FieldChain:
    """Ordered rules for a single field."""
    name: str
    rules: list[Rule] = field(default_factory=list)
    bail: bool = False

    def not_empty(self, message: str) -> "FieldChain":
        self.rules.append(Rule(is_present, message, "not_empty"))
        return self

    def numeric(self, message: str) -> "FieldChain":
        self.rules.append(Rule(is_numeric, message, "numeric"))
        return self

    def positive(self, message: str) -> "FieldChain":
        self.rules.append(Rule(is_positive, message, "positive"))
        return self

    def integer(self, message: str) -> "FieldChain":
        self.rules.append(Rule(is_int, message, "int"))
        return self

    def email(self, message: str) -> "FieldChain":
        self.rules.append(Rule(is_email, message, "email"))
        return self

    def custom(self, check: Predicate, message: str, type: str = "custom") -> "FieldChain":
        self.rules.append(Rule(check, message, type))
        return self

    def length(
        self, message: str, min_length: int = 0, max_length: int | None = None,
    ) -> "FieldChain":
        def check(value: Any) -> bool:
            if value is None:
                value = ""
            if not isinstance(value, (str, int, float)) or isinstance(value, bool):
                return False
            size = len(str(value))
            return size >= min_length and (max_length is None or size <= max_length)
        self.rules.append(Rule(check, message, "length"))
        return self

    def max_bytes(self, message: str, limit: int) -> "FieldChain":
        """UTF-8 encoded size limit; missing values pass."""
        def check(value: Any) -> bool:
            if value is None:
                return True
            return len(str(value).encode("utf-8")) <= limit
        self.rules.append(Rule(check, message, "max_bytes"))
        return self

    def decimal_places(self, message: str, places: int) -> "FieldChain":
        def check(value: Any) -> bool:
            number = _as_decimal(value)
            return number is None or _fraction_digits(number) <= places
        self.rules.append(Rule(check, message, "decimal_places"))
        return self

    def below(self, message: str, limit: Decimal) -> "FieldChain":
        def check(value: Any) -> bool:
            number = _as_decimal(value)
            return number is None or abs(number) < limit
        self.rules.append(Rule(check, message, "max_value"))
        return self

    def run(self, data: dict) -> list[FieldError]:
        value = data.get(self.name)
        errors = []
        for rule in self.rules:
            if not rule.check(value):
                errors.append(FieldError(self.name, rule.message, rule.type))
                if self.bail:
                    break
        return errors


def check_fields(data: Any, *chains: FieldChain) -> list[FieldError]:
    """Run every chain against data and return all failures in chain order."""
    if not isinstance(data, dict):
        data = {}
    errors: list[FieldError] = []
    for chain in chains:
        errors.extend(chain.run(data))
    return errors


def require_valid(data: Any, *chains: FieldChain) -> dict:
    """Raise InputValidationError carrying every failure, else return data."""
    errors = check_fields(data, *chains)
    if errors:
        raise InputValidationError(errors)
    return data if isinstance(data, dict) else {}


class RuledInput(BaseModel):
    """Request body model whose field rule chains run before typed parsing."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    rules: ClassVar[tuple[FieldChain, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _apply_rules(cls, data: Any) -> dict:
        return require_valid(data, *cls.rules)


def build_input(model: type[BaseModel], data: Any):
    """Build a typed input model, reporting every failure as field errors."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InputValidationError([
            FieldError(".".join(str(loc) for loc in err["loc"]), err["msg"], err["type"])
            for err in e.errors()
        ])


# ─── Predicates ──────────────────────────────────────────────────

def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def _as_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = Decimal(str(value))
        return number if number.is_finite() else None
    if isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _fraction_digits(number: Decimal) -> int:
    exponent = number.normalize().as_tuple().exponent
    return max(0, -exponent)


def is_numeric(value: Any) -> bool:
    return _as_decimal(value) is not None


def is_positive(value: Any) -> bool:
    number = _as_decimal(value)
    return number is not None and number > 0


def is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _ASCII_INT.fullmatch(value) is not None


def is_email(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def to_decimal(value: Any) -> Decimal:
    """Convert an already-validated amount to Decimal."""
    number = _as_decimal(value)
    if number is None:
        raise ValueError(f"not a number: {value!r}")
    return number

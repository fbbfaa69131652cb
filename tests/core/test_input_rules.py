"""Input Rules — tests for accumulating field rule chains.

Tests cover:
    - every failing rule of every field is reported, in chain order
    - bail chains stop at their first failure
    - numeric / positive / email / length predicates
    - build_input turns type mismatches into field errors
"""

from decimal import Decimal

import pytest
from pydantic import BaseModel

from cashtrackr.core.errors import InputValidationError
from cashtrackr.core.input_rules import (
    FieldChain, RuledInput, build_input, check_fields, is_email, is_int, is_numeric,
    is_positive, is_present, require_valid, to_decimal,
)
from cashtrackr.schemas.auth import CREATE_ACCOUNT_RULES, LOGIN_RULES
from cashtrackr.schemas.budget import BUDGET_RULES, BudgetInput
from cashtrackr.schemas.expense import EXPENSE_RULES


# ─── Accumulation ────────────────────────────────────────────────

def test_empty_budget_body_yields_four_errors():
    errors = check_fields({}, *BUDGET_RULES)
    assert [e.field for e in errors] == ["name", "amount", "amount", "amount"]
    assert [e.message for e in errors] == [
        "El nombre del presupuesto no puede ir vacio",
        "La cantidad del presupuesto no puede ir vacia",
        "Cantidad no valida",
        "El presupuesto debe ser mayor a cero",
    ]


def test_empty_expense_body_yields_four_errors():
    errors = check_fields({}, *EXPENSE_RULES)
    assert len(errors) == 4
    assert errors[0].message == "El nombre del gasto no puede ir vacio"


def test_empty_create_account_body_yields_three_errors():
    errors = check_fields({}, *CREATE_ACCOUNT_RULES)
    assert [e.field for e in errors] == ["name", "password", "email"]


def test_empty_login_body_yields_two_errors():
    errors = check_fields({}, *LOGIN_RULES)
    assert [e.field for e in errors] == ["email", "password"]


def test_negative_amount_only_fails_positive_rule():
    errors = check_fields({"name": "Casa", "amount": -5}, *BUDGET_RULES)
    assert len(errors) == 1
    assert errors[0].type == "positive"


def test_non_numeric_amount_fails_numeric_and_positive():
    errors = check_fields({"name": "Casa", "amount": "abc"}, *BUDGET_RULES)
    assert [e.type for e in errors] == ["numeric", "positive"]


def test_budget_name_longer_than_100_chars_rejected():
    errors = check_fields({"name": "x" * 101, "amount": 10}, *BUDGET_RULES)
    assert [e.type for e in errors] == ["length"]


def test_non_dict_body_treated_as_empty():
    assert len(check_fields(["not", "a", "dict"], *LOGIN_RULES)) == 2


def test_bail_chain_stops_at_first_failure():
    chain = FieldChain("id", bail=True).integer("bad").custom(lambda v: int(v) > 0, "bad")
    assert len(chain.run({"id": "abc"})) == 1


def test_require_valid_raises_with_all_details():
    with pytest.raises(InputValidationError) as exc:
        require_valid({}, *BUDGET_RULES)
    assert len(exc.value.details) == 4
    assert exc.value.http_status == 400


def test_require_valid_returns_data_when_valid():
    data = {"name": "Casa", "amount": "1500.50"}
    assert require_valid(data, *BUDGET_RULES) is data


# ─── Predicates ──────────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    (None, False), ("", False), ("a", True), (0, True), (False, True),
])
def test_is_present(value, expected):
    assert is_present(value) is expected


@pytest.mark.parametrize("value,expected", [
    (10, True), (10.5, True), ("3000", True), (" 12.5 ", True),
    ("abc", False), ("", False), (None, False), (True, False), ("NaN", False),
])
def test_is_numeric(value, expected):
    assert is_numeric(value) is expected


@pytest.mark.parametrize("value,expected", [
    (1, True), ("0.01", True), (0, False), ("-1", False), ("abc", False),
])
def test_is_positive(value, expected):
    assert is_positive(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("1", True), (7, True), ("-3", True), ("1.5", False), ("not_valid", False),
    (True, False), (None, False), ("\u00b2", False), ("\u0661\u0662", False), ("12\n", False),
])
def test_is_int(value, expected):
    assert is_int(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("test@test.com", True), ("not_valid_email", False), ("", False), (None, False),
])
def test_is_email(value, expected):
    assert is_email(value) is expected


def test_length_rule_counts_missing_value_as_empty():
    chain = FieldChain("password").length("short", min_length=8)
    assert len(chain.run({})) == 1
    assert chain.run({"password": "12345678"}) == []


def test_to_decimal_converts_numbers_and_strings():
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal(3) == Decimal("3")
    with pytest.raises(ValueError):
        to_decimal("abc")


# ─── build_input ─────────────────────────────────────────────────

class _Named(BaseModel):
    name: str


def test_build_input_reports_type_mismatch_as_field_error():
    with pytest.raises(InputValidationError) as exc:
        build_input(_Named, {"name": ["a", "list"]})
    assert exc.value.details[0].field == "name"


def test_build_input_returns_model():
    assert build_input(_Named, {"name": "Ana"}).name == "Ana"


# ─── Precision, range and size rules ─────────────────────────────

@pytest.mark.parametrize("amount", ["0.001", 0.001, "12.345"])
def test_amount_with_more_than_two_decimals_rejected(amount):
    errors = check_fields({"name": "Casa", "amount": amount}, *BUDGET_RULES)
    assert [e.type for e in errors] == ["decimal_places"]


@pytest.mark.parametrize("amount", ["100000000", 100000000, "1e9"])
def test_amount_beyond_column_range_rejected(amount):
    errors = check_fields({"name": "Casa", "amount": amount}, *BUDGET_RULES)
    assert [e.type for e in errors] == ["max_value"]


@pytest.mark.parametrize("amount", ["99999999.99", "0.01", "1500.50", "1.500", 25])
def test_amount_that_fits_the_column_accepted(amount):
    assert check_fields({"name": "Casa", "amount": amount}, *BUDGET_RULES) == []


def test_max_bytes_counts_utf8_bytes():
    chain = FieldChain("password").max_bytes("long", 72)
    assert chain.run({"password": "a" * 72}) == []
    assert len(chain.run({"password": "a" * 73})) == 1
    # 2 bytes per character
    assert len(chain.run({"password": "ñ" * 37})) == 1
    assert chain.run({}) == []


# ─── RuledInput ──────────────────────────────────────────────────

def test_ruled_input_reports_every_rule_failure():
    with pytest.raises(InputValidationError) as exc:
        build_input(BudgetInput, {})
    assert len(exc.value.details) == 4


def test_ruled_input_parses_valid_payload():
    budget = build_input(BudgetInput, {"name": 2024, "amount": "1500.50"})
    assert budget.name == "2024"
    assert budget.amount == Decimal("1500.50")


class _Nickname(RuledInput):
    rules = (FieldChain("nick").not_empty("vacio"),)

    nick: str


def test_ruled_input_rules_run_before_field_parsing():
    with pytest.raises(InputValidationError) as exc:
        _Nickname.model_validate({})
    assert [(d.field, d.type) for d in exc.value.details] == [("nick", "not_empty")]

"""Error Hierarchy — status codes and response envelope."""

import pytest

from cashtrackr.core.errors import (
    AccountNotConfirmedError, EmailDeliveryError, EmailTakenError, FieldError,
    InputValidationError, InvalidSessionTokenError, InvalidTokenError,
    LinkageError, NotAuthenticatedError, OwnershipError, ResourceNotFoundError,
    UnknownTokenError, UserNotFoundError, WrongPasswordError,
)


@pytest.mark.parametrize("error,status", [
    (NotAuthenticatedError(), 401),
    (InvalidTokenError(), 401),
    (WrongPasswordError(), 401),
    (OwnershipError(), 401),
    (AccountNotConfirmedError(), 403),
    (LinkageError(), 403),
    (ResourceNotFoundError("Presupuesto no encontrado"), 404),
    (UserNotFoundError(), 404),
    (UnknownTokenError(), 404),
    (EmailTakenError(), 409),
    (InvalidSessionTokenError(), 500),
    (EmailDeliveryError("smtp down"), 500),
])
def test_http_status(error, status):
    assert error.http_status == status


def test_response_envelope():
    body = NotAuthenticatedError().to_response()
    assert body["error"]["message"] == "No autorizado"
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert "timestamp" in body["error"]


def test_validation_envelope_carries_details():
    err = InputValidationError([
        FieldError("name", "vacio", "not_empty"),
        FieldError("amount", "vacia", "not_empty"),
    ])
    details = err.to_response()["error"]["details"]
    assert details == [
        {"field": "name", "message": "vacio", "type": "not_empty"},
        {"field": "amount", "message": "vacia", "type": "not_empty"},
    ]


def test_email_delivery_error_hides_reason():
    err = EmailDeliveryError("535 authentication failed for admin")
    assert "535" not in err.to_response()["error"]["message"]

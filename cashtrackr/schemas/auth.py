"""Auth Schemas — request bodies (with their field rules) for the account endpoints.

Invariants:
    - create-account: name not empty, password >= 8 chars, valid email (empty body → 3 errors)
    - login: valid email, password not empty (empty body → 2 errors)
    - opaque tokens are exactly 6 characters
    - name and email never exceed their column sizes (60 / 50 characters)
    - every password field is capped at 72 UTF-8 bytes, the most bcrypt hashes
"""

from pydantic import BaseModel, ConfigDict

from cashtrackr.core.input_rules import FieldChain, RuledInput

NAME_MAX_LENGTH = 60
EMAIL_MAX_LENGTH = 50
PASSWORD_MAX_BYTES = 72

PASSWORD_TOO_SHORT = "El password es muy corto, minimo 8 caracteres"
PASSWORD_TOO_LONG = "El password es muy largo, maximo 72 bytes"
NAME_TOO_LONG = "El nombre es muy largo, maximo 60 caracteres"
EMAIL_TOO_LONG = "El email es muy largo, maximo 50 caracteres"
TOKEN_INVALID = "Token no valido"


def _token_chain() -> FieldChain:
    return FieldChain("token").length(TOKEN_INVALID, min_length=6, max_length=6)


def _name_chain() -> FieldChain:
    return (
        FieldChain("name")
        .not_empty("El nombre no puede ir vacio")
        .length(NAME_TOO_LONG, max_length=NAME_MAX_LENGTH)
    )


def _email_chain(message: str) -> FieldChain:
    return (
        FieldChain("email")
        .email(message)
        .length(EMAIL_TOO_LONG, max_length=EMAIL_MAX_LENGTH)
    )


def _new_password_chain(name: str = "password", short: str = PASSWORD_TOO_SHORT) -> FieldChain:
    return (
        FieldChain(name)
        .length(short, min_length=8)
        .max_bytes(PASSWORD_TOO_LONG, PASSWORD_MAX_BYTES)
    )


def _given_password_chain(name: str, message: str) -> FieldChain:
    return (
        FieldChain(name)
        .not_empty(message)
        .max_bytes(PASSWORD_TOO_LONG, PASSWORD_MAX_BYTES)
    )


CREATE_ACCOUNT_RULES = (
    _name_chain(),
    _new_password_chain(),
    _email_chain("E-mail no valido"),
)

LOGIN_RULES = (
    FieldChain("email").email("Email no valido"),
    _given_password_chain("password", "El password es obligatorio"),
)


class CreateAccount(RuledInput):
    rules = CREATE_ACCOUNT_RULES

    name: str
    email: str
    password: str


class Credentials(RuledInput):
    rules = LOGIN_RULES

    email: str
    password: str


class TokenBody(RuledInput):
    rules = (_token_chain(),)

    token: str


class EmailBody(RuledInput):
    rules = (FieldChain("email").email("Email no valido"),)

    email: str


class ResetPassword(RuledInput):
    """Token comes from the path, password from the body."""
    rules = (_token_chain(), _new_password_chain())

    token: str
    password: str


class ProfileUpdate(RuledInput):
    rules = (_name_chain(), _email_chain("E-mail no valido"))

    name: str
    email: str


class PasswordUpdate(RuledInput):
    rules = (
        _given_password_chain("current_password", "El password actual no puede ir vacio"),
        _new_password_chain(
            "password", "El password nuevo es muy corto, minimo 8 caracteres",
        ),
    )

    current_password: str
    password: str


class PasswordCheck(RuledInput):
    rules = (
        _given_password_chain("password", "El password actual no puede ir vacio"),
    )

    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

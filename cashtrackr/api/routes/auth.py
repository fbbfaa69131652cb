"""Auth Routes — account lifecycle and session endpoints.

Invariants:
    - Every body passes its full rule set before the service is called
      (validation failures never reach IdentityService)
    - /user, /update-password and /check-password require a session token
    - Success responses are JSON strings, except login (the session token)
      and GET /user (the profile)
"""

import logging

from fastapi import APIRouter, Depends, status

from cashtrackr.api.dependencies import (
    get_current_user, get_identity_service, json_body,
)
from cashtrackr.core.domain_types import AuthenticatedUser
from cashtrackr.core.input_rules import build_input
from cashtrackr.schemas import auth as schemas
from cashtrackr.services.identity import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/create-account", status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.CreateAccount, payload)
    await identity.register(body.name, body.email, body.password)
    return "Cuenta creada correctamente"


@router.post("/confirm-account")
async def confirm_account(
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.TokenBody, payload)
    await identity.confirm_account(body.token)
    return "Cuenta confirmada correctamente"


@router.post("/login")
async def login(
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.Credentials, payload)
    return await identity.login(body.email, body.password)


@router.post("/forgot-password")
async def forgot_password(
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.EmailBody, payload)
    await identity.forgot_password(body.email)
    return "Revisa tu email para instrucciones"


@router.post("/validate-token")
async def validate_token(
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.TokenBody, payload)
    await identity.validate_reset_token(body.token)
    return "Token valido, asigna un nuevo password"


@router.post("/reset-password/{token}")
async def reset_password(
    token: str,
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.ResetPassword, {**payload, "token": token})
    await identity.reset_password(body.token, body.password)
    return "El password se modifico correctamente"


@router.get("/user", response_model=schemas.UserResponse)
async def get_user(user: AuthenticatedUser = Depends(get_current_user)):
    return user


@router.put("/user")
async def update_user(
    user: AuthenticatedUser = Depends(get_current_user),
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.ProfileUpdate, payload)
    await identity.update_profile(user.id, body.name, body.email)
    return "Perfil actualizado correctamente"


@router.post("/update-password")
async def update_password(
    user: AuthenticatedUser = Depends(get_current_user),
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.PasswordUpdate, payload)
    await identity.change_password(user.id, body.current_password, body.password)
    return "El password se modifico correctamente"


@router.post("/check-password")
async def check_password(
    user: AuthenticatedUser = Depends(get_current_user),
    payload: dict = Depends(json_body),
    identity: IdentityService = Depends(get_identity_service),
):
    body = build_input(schemas.PasswordCheck, payload)
    await identity.check_password(user.id, body.password)
    return "Password Correcto"

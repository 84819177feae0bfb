# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for registration, login and account self-service.
#
# Every endpoint that authenticates the caller answers with
# {"success": true, "token": "..."} and also sets the token as an
# http-only cookie so browser clients need no header handling.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenResponse
from app.config import settings
from core.models import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from core.services.auth_service import AuthService
from core.services.user_service import UserService
from lib.security import create_access_token
from lib.utils import serialize_document

logger = logging.getLogger(__name__)

router = APIRouter()

TOKEN_COOKIE = "token"
LOGOUT_COOKIE_MAX_AGE = 10


def _token_response(user: dict[str, Any], status_code: int = 200) -> JSONResponse:
    """Sign a token for the user and return it in the body and a cookie."""
    token = create_access_token(str(user["_id"]))
    response = JSONResponse(
        status_code=status_code,
        content=TokenResponse(token=token).model_dump(),
    )
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=settings.jwt_cookie_max_age,
        httponly=True,
        secure=settings.is_production,
    )
    return response


@router.post("/register")
async def register(body: RegisterRequest):
    """
    Register a user or publisher.

    Returns a token for the new account.
    """
    user = AuthService.register(body)
    return _token_response(user)


@router.post("/login")
async def login(body: LoginRequest):
    """
    Log in with email and password.

    Raises:
        400: If either field is missing
        401: If the credentials don't match
    """
    user = AuthService.login(body)
    return _token_response(user)


@router.get("/logout")
async def logout():
    """
    Log out by overwriting the token cookie with a short-lived placeholder.
    """
    response = JSONResponse(content={"success": True, "data": {}})
    response.set_cookie(
        key=TOKEN_COOKIE,
        value="none",
        max_age=LOGOUT_COOKIE_MAX_AGE,
        httponly=True,
    )
    return response


@router.get("/me")
async def get_me(user: AuthUser = Depends(get_current_user)):
    """
    Get the current authenticated user's profile.

    The password hash and reset-token fields are never included.
    """
    document = UserService.get_user(user.id)
    return {"success": True, "data": serialize_document(document)}


@router.put("/updatedetails")
async def update_details(
    body: UpdateDetailsRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Update the caller's name and/or email."""
    document = AuthService.update_details(user, body)
    return {"success": True, "data": serialize_document(document)}


@router.put("/updatepassword")
async def update_password(
    body: UpdatePasswordRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Change the caller's password.

    Raises:
        401: If current_password is wrong
    """
    document = AuthService.update_password(user, body.current_password, body.new_password)
    return _token_response(document)


@router.post("/forgotpassword")
async def forgot_password(body: ForgotPasswordRequest, request: Request):
    """
    Email a password reset link.

    Raises:
        404: If no account uses the email
        500: If the email could not be sent
    """
    reset_url_base = f"{str(request.base_url).rstrip('/')}/api/v1/auth/resetpassword"
    AuthService.forgot_password(body.email, reset_url_base)
    return {"success": True, "data": "Email sent"}


@router.put("/resetpassword/{resettoken}")
async def reset_password(resettoken: str, body: ResetPasswordRequest):
    """
    Set a new password with a mailed reset token.

    Raises:
        400: If the token is unknown or expired
    """
    user = AuthService.reset_password(resettoken, body.password)
    return _token_response(user)

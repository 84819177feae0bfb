# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and authorization.
#
# The access token is read from:
# - the Authorization: Bearer <token> header (preferred), or
# - the `token` cookie set by the login/register endpoints
#
# Usage:
#   from app.auth import AuthUser, authorize, get_current_user
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
#
#   @router.post("/", dependencies=[Depends(authorize("publisher", "admin"))])
#   async def create(...): ...
# =============================================================================

import logging
from typing import Callable, Optional

from bson.errors import InvalidId
from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from pydantic import ValidationError

from app.auth.models import AuthUser, TokenPayload
from app.exceptions import RoleForbiddenError, UnauthorizedError
from lib.database import Database
from lib.security import decode_access_token
from lib.utils import to_object_id

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor; a missing header falls through to the cookie
security_optional = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    cookie_token: Optional[str],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    if cookie_token and cookie_token != "none":
        return cookie_token
    return None


def _load_user(token: str) -> AuthUser:
    """
    Verify the token and load the user it names.

    Raises:
        UnauthorizedError: If the token is invalid/expired or the user is gone
    """
    try:
        payload = TokenPayload.model_validate(decode_access_token(token))
    except ExpiredSignatureError:
        logger.warning("Access token has expired")
        raise UnauthorizedError()
    except (JWTError, ValidationError) as e:
        logger.warning(f"Access token validation failed: {e}")
        raise UnauthorizedError()

    try:
        user = Database.users().find_one({"_id": to_object_id(payload.id)})
    except InvalidId:
        logger.warning(f"Malformed user id in token: {payload.id}")
        raise UnauthorizedError()

    if not user:
        logger.warning(f"Token names unknown user: {payload.id}")
        raise UnauthorizedError()

    try:
        return AuthUser.from_document(user)
    except ValidationError as e:
        logger.warning(f"Stored user {payload.id} is not a valid principal: {e}")
        raise UnauthorizedError()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    token: Optional[str] = Cookie(default=None),
) -> AuthUser:
    """
    Resolve the authenticated user from the bearer header or cookie.

    Returns:
        AuthUser: The authenticated user

    Raises:
        UnauthorizedError: 401 if no token, or the token is invalid or expired
    """
    raw_token = _extract_token(credentials, token)
    if not raw_token:
        raise UnauthorizedError()

    user = _load_user(raw_token)
    logger.debug(f"Authenticated user: {user.id}")
    return user


def authorize(*roles: str) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Runs after get_current_user, so an anonymous request gets 401 before
    the role is ever checked.

    Raises:
        RoleForbiddenError: 403 if the user's role is not allowed
    """
    allowed = set(roles)

    async def role_checker(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role.value not in allowed:
            logger.warning(f"User {user.id} with role {user.role.value} denied; needs {sorted(allowed)}")
            raise RoleForbiddenError(user.role.value)
        return user

    return role_checker

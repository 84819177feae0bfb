# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
#
# AuthUser (the request principal) is defined with the other user schemas in
# core/models/user.py so services can accept it; it is re-exported here.
# =============================================================================

from pydantic import BaseModel

from core.models import AuthUser


class TokenPayload(BaseModel):
    """
    Decoded access token payload.

    `id` is the user id; `iat`/`exp` are standard JWT claims.
    """
    id: str
    iat: int | None = None
    exp: int


class TokenResponse(BaseModel):
    """Body returned by every endpoint that issues a token."""
    success: bool = True
    token: str


__all__ = ["AuthUser", "TokenPayload", "TokenResponse"]

# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication and role checks.
#
# Usage:
#   from app.auth import get_current_user, authorize, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import authorize, get_current_user
from app.auth.models import AuthUser, TokenResponse

__all__ = [
    "authorize",
    "get_current_user",
    "AuthUser",
    "TokenResponse",
]

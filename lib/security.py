# =============================================================================
# lib/security.py - Passwords, Access Tokens and Reset Tokens
# =============================================================================
# Framework-agnostic helpers used by the auth service and the auth guard:
# - bcrypt password hashing via passlib
# - HS256 access tokens via python-jose
# - one-time password reset tokens (random value, SHA-256 hash stored)
# =============================================================================

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from app.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


# =============================================================================
# Access Tokens
# =============================================================================

def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Sign an access token for a user.

    The payload carries the user id in the `id` claim plus `iat`/`exp`.

    Args:
        user_id: The user's id (hex string)
        expires_delta: Override the configured lifetime (used by tests)

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    payload = {"id": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of an access token.

    Raises:
        jose.ExpiredSignatureError: If the token has expired
        jose.JWTError: If the token is malformed or the signature is wrong
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


# =============================================================================
# Password Reset Tokens
# =============================================================================

def hash_reset_token(token: str) -> str:
    """SHA-256 hex digest of a reset token; only the digest is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str, datetime]:
    """
    Create a password reset token.

    Returns:
        Tuple of (plain token sent by email, hashed token to store, expiry)
    """
    token = secrets.token_hex(20)
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    return token, hash_reset_token(token), expire

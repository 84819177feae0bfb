# =============================================================================
# core/models/user.py - User and Auth Request Schemas
# =============================================================================
# These models define the API contract for users and authentication:
# - UserCreate / UserUpdate: admin user management
# - RegisterRequest, LoginRequest, ...: self-service auth endpoints
#
# Passwords arrive in plaintext and are hashed by the service; the stored
# hash and reset-token fields are never serialized.
# =============================================================================

from datetime import datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import EntityModel, Role

MIN_PASSWORD_LENGTH = 6


class UserCreate(EntityModel):
    """
    Schema for creating a user.

    Example:
        {"name": "John Doe", "email": "john@gmail.com", "password": "123456", "role": "publisher"}
    """
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class RegisterRequest(UserCreate):
    """Self-registration; the admin role cannot be self-assigned."""

    @field_validator("role")
    @classmethod
    def no_self_admin(cls, value: Role) -> Role:
        if value == Role.ADMIN:
            raise ValueError("Role must be user or publisher")
        return value


class UserUpdate(EntityModel):
    """Admin update of any user; a password, when sent, is re-hashed."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
    role: Role | None = None

    @field_validator("name", "email", "password", "role", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str | None) -> str | None:
        return value.lower() if value else value


class UserDetails(EntityModel):
    """Name and email, re-validated after merging an update."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class UserRecord(UserDetails):
    """A stored user after an admin update: name, email and a valid role."""
    role: Role


class UpdateDetailsRequest(EntityModel):
    """Self-service update of name and email."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None


class LoginRequest(EntityModel):
    """
    Login credentials.

    Both fields are optional at the schema level so the endpoint can answer
    with a single "provide both" message.
    """
    email: str | None = None
    password: str | None = None


class UpdatePasswordRequest(EntityModel):
    current_password: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class ForgotPasswordRequest(EntityModel):
    email: EmailStr


class ResetPasswordRequest(EntityModel):
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


USER_FIELDS: dict[str, type] = {
    "_id": ObjectId,
    "name": str,
    "email": str,
    "role": str,
    "joined_bootcamps": ObjectId,
    "created_at": datetime,
}


class AuthUser(BaseModel):
    """
    The authenticated user attached to a request (the principal).

    Built from the users collection by the auth guard and passed to
    services for ownership and role checks.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "AuthUser":
        """Create an AuthUser from a users document."""
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            role=doc.get("role", Role.USER.value),
        )

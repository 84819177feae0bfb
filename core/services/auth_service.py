# =============================================================================
# core/services/auth_service.py - Authentication Business Logic
# =============================================================================
# Registration, login, self-service profile changes and the password reset
# flow. Token issuance (cookie + JSON) is an HTTP concern and lives in
# app/auth/routes.py; this module only decides who the user is.
#
# Reset flow:
#   1. forgot_password stores sha256(token) and an expiry, mails the token
#   2. reset_password hashes the presented token and matches an unexpired user
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    DependencyFailureError,
    EmailNotFoundError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    UnauthorizedError,
    ValidationFailedError,
)
from core.models import (
    AuthUser,
    LoginRequest,
    RegisterRequest,
    UpdateDetailsRequest,
    UserDetails,
    updates_from,
)
from core.services.user_service import UserService
from lib.database import Database
from lib.mailer import MailerError, send_email
from lib.security import generate_reset_token, hash_password, hash_reset_token, verify_password
from lib.utils import utcnow

logger = logging.getLogger(__name__)

RESET_FIELDS = {"reset_password_token": "", "reset_password_expire": ""}


class AuthService:
    """
    Service for authentication operations.
    """

    @staticmethod
    def register(data: RegisterRequest) -> dict[str, Any]:
        """
        Create an account for a user or publisher.

        Raises:
            pymongo.errors.DuplicateKeyError: If the email is taken
        """
        return UserService.create_user(data)

    @staticmethod
    def login(data: LoginRequest) -> dict[str, Any]:
        """
        Check credentials and return the user.

        Raises:
            ValidationFailedError: If email or password is missing
            InvalidCredentialsError: If no user matches or the password is wrong
        """
        if not data.email or not data.password:
            raise ValidationFailedError(["Please provide an email and password"])

        user = UserService.get_by_email(data.email)
        if not user or not verify_password(data.password, user.get("password")):
            logger.warning(f"Failed login for {data.email}")
            raise InvalidCredentialsError()

        logger.info(f"User logged in: {user['_id']}")
        return user

    @staticmethod
    def update_details(user: AuthUser, data: UpdateDetailsRequest) -> dict[str, Any]:
        """
        Change the caller's name and/or email.

        Raises:
            pydantic.ValidationError: If the merged details are invalid
            pymongo.errors.DuplicateKeyError: If the new email is taken
        """
        current = UserService.get_user(user.id)

        updates = updates_from(data)
        if not updates:
            return current

        merged = UserDetails.model_validate({**current, **updates})
        changes = merged.model_dump(mode="json", include=set(updates))

        Database.users().update_one({"_id": current["_id"]}, {"$set": changes})
        logger.info(f"User {user.id} updated details: {sorted(changes)}")
        return UserService.get_user(current["_id"])

    @staticmethod
    def update_password(user: AuthUser, current_password: str, new_password: str) -> dict[str, Any]:
        """
        Replace the caller's password after checking the current one.

        Raises:
            UnauthorizedError: If the current password is wrong
        """
        current = UserService.get_user(user.id)
        if not verify_password(current_password, current.get("password")):
            logger.warning(f"Wrong current password for user {user.id}")
            raise UnauthorizedError("Password is incorrect")

        Database.users().update_one(
            {"_id": current["_id"]},
            {"$set": {"password": hash_password(new_password)}},
        )
        logger.info(f"User {user.id} changed password")
        return current

    @staticmethod
    def forgot_password(email: str, reset_url_base: str) -> None:
        """
        Store a reset token for the user and mail them the reset URL.

        Args:
            email: Account email
            reset_url_base: URL the plain token is appended to

        Raises:
            EmailNotFoundError: If no account uses the email
            DependencyFailureError: If the email cannot be sent; the stored
                token is cleared first
        """
        user = UserService.get_by_email(email)
        if not user:
            raise EmailNotFoundError(email)

        token, hashed, expire = generate_reset_token()
        Database.users().update_one(
            {"_id": user["_id"]},
            {"$set": {"reset_password_token": hashed, "reset_password_expire": expire}},
        )

        reset_url = f"{reset_url_base.rstrip('/')}/{token}"
        message = (
            "You are receiving this email because you (or someone else) has "
            "requested the reset of a password. Please make a PUT request to:\n\n"
            f"{reset_url}"
        )

        try:
            send_email(user["email"], "Password reset token", message)
        except MailerError as e:
            Database.users().update_one({"_id": user["_id"]}, {"$unset": RESET_FIELDS})
            raise DependencyFailureError("Email could not be sent", details=e.details)

        logger.info(f"Reset token issued for user {user['_id']}")

    @staticmethod
    def reset_password(token: str, password: str) -> dict[str, Any]:
        """
        Set a new password using a mailed reset token.

        Raises:
            InvalidResetTokenError: If the token is unknown or expired
        """
        user = Database.users().find_one({"reset_password_token": hash_reset_token(token)})
        if not user or user.get("reset_password_expire") is None:
            raise InvalidResetTokenError()
        if user["reset_password_expire"] <= utcnow():
            logger.warning(f"Expired reset token used for user {user['_id']}")
            raise InvalidResetTokenError()

        Database.users().update_one(
            {"_id": user["_id"]},
            {"$set": {"password": hash_password(password)}, "$unset": RESET_FIELDS},
        )
        logger.info(f"Password reset for user {user['_id']}")
        return user

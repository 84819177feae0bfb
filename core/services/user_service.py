# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Admin user management plus the lookups the auth layer needs.
# Email uniqueness is enforced by a unique index; a violation surfaces as
# DuplicateKeyError and is reported as a 400 by the exception handlers.
# =============================================================================

import logging
from typing import Any

from bson import ObjectId

from app.exceptions import UserNotFoundError
from core.models import UserCreate, UserRecord, UserUpdate, updates_from
from lib.database import Database
from lib.security import hash_password
from lib.utils import to_object_id, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user operations.
    """

    @staticmethod
    def get_user(user_id: str | ObjectId) -> dict[str, Any]:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = Database.users().find_one({"_id": to_object_id(user_id)})
        if not user:
            raise UserNotFoundError(str(user_id))
        return user

    @staticmethod
    def get_by_email(email: str) -> dict[str, Any] | None:
        """Look up a user by (lowercased) email; None when unknown."""
        return Database.users().find_one({"email": email.strip().lower()})

    @staticmethod
    def create_user(data: UserCreate) -> dict[str, Any]:
        """
        Create a user with a hashed password.

        Raises:
            pymongo.errors.DuplicateKeyError: If the email is taken
        """
        fields = data.model_dump(mode="json")
        document = {
            **fields,
            "password": hash_password(fields["password"]),
            "joined_bootcamps": [],
            "created_at": utcnow(),
        }
        result = Database.users().insert_one(document)

        logger.info(f"Created user: {result.inserted_id} role: {document['role']}")
        return UserService.get_user(result.inserted_id)

    @staticmethod
    def update_user(user_id: str, data: UserUpdate) -> dict[str, Any]:
        """
        Update any user field. A new password is re-hashed.

        Raises:
            UserNotFoundError: If the user doesn't exist
            pydantic.ValidationError: If the merged user is invalid
            pymongo.errors.DuplicateKeyError: If the new email is taken
        """
        user = UserService.get_user(user_id)

        updates = updates_from(data)
        if not updates:
            return user

        UserRecord.model_validate({**user, **updates})
        if "password" in updates:
            updates["password"] = hash_password(updates["password"])

        Database.users().update_one({"_id": user["_id"]}, {"$set": updates})
        logger.info(f"Updated user: {user['_id']} fields: {sorted(updates)}")
        return UserService.get_user(user["_id"])

    @staticmethod
    def delete_user(user_id: str) -> None:
        """
        Delete a user and remove them from every bootcamp's members.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = UserService.get_user(user_id)
        oid = user["_id"]

        Database.bootcamps().update_many({"joined_users": oid}, {"$pull": {"joined_users": oid}})
        Database.users().delete_one({"_id": oid})
        logger.info(f"Deleted user: {oid}")

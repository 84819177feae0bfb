# =============================================================================
# core/services/review_service.py - Review Business Logic
# =============================================================================
# Handles review CRUD. One review per user per bootcamp: create checks for
# an existing review, and the unique (bootcamp, user) index catches a
# concurrent second insert as DuplicateKeyError. Both are reported as 400.
# Callers schedule AggregateService.recalculate_average_rating after every
# write.
# =============================================================================

import logging
from typing import Any

from bson import ObjectId

from app.exceptions import ConflictError, NotJoinedError, ReviewNotFoundError
from core.models import AuthUser, ReviewCreate, ReviewUpdate, updates_from
from core.services.bootcamp_service import BOOTCAMP_SUMMARY, BootcampService
from core.services.permissions import ensure_owner
from lib.database import Database
from lib.query_builder import apply_populate
from lib.utils import to_object_id, utcnow

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Service for review operations.
    """

    @staticmethod
    def list_for_bootcamp(bootcamp_id: str) -> list[dict[str, Any]]:
        """All reviews of one bootcamp, newest first."""
        oid = to_object_id(bootcamp_id)
        return list(Database.reviews().find({"bootcamp": oid}).sort("created_at", -1))

    @staticmethod
    def get_review(review_id: str | ObjectId, populate: bool = False) -> dict[str, Any]:
        """
        Get a review by ID, optionally with its bootcamp summary inline.

        Raises:
            ReviewNotFoundError: If the review doesn't exist
        """
        review = Database.reviews().find_one({"_id": to_object_id(review_id)})
        if not review:
            raise ReviewNotFoundError(str(review_id))
        if populate:
            apply_populate(Database.reviews(), [review], BOOTCAMP_SUMMARY)
        return review

    @staticmethod
    def create_review(
        bootcamp_id: str,
        data: ReviewCreate,
        user: AuthUser,
    ) -> dict[str, Any]:
        """
        Review a bootcamp. Non-admins must have joined it first.

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            NotJoinedError: If a non-admin never joined the bootcamp
            ConflictError: If the user already reviewed it
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        user_oid = to_object_id(user.id)

        if not user.is_admin and user_oid not in bootcamp.get("joined_users", []):
            raise NotJoinedError(user.id, str(bootcamp["_id"]))

        if Database.reviews().find_one({"bootcamp": bootcamp["_id"], "user": user_oid}):
            logger.info(f"User {user.id} already reviewed bootcamp {bootcamp['_id']}")
            raise ConflictError()

        document = {
            **data.model_dump(mode="json"),
            "bootcamp": bootcamp["_id"],
            "user": user_oid,
            "created_at": utcnow(),
        }
        result = Database.reviews().insert_one(document)

        logger.info(f"Created review: {result.inserted_id} for bootcamp: {bootcamp['_id']}")
        return ReviewService.get_review(result.inserted_id)

    @staticmethod
    def update_review(review_id: str, data: ReviewUpdate, user: AuthUser) -> dict[str, Any]:
        """
        Update a review after an ownership check; the merged review is
        re-validated before it is written.

        Raises:
            ReviewNotFoundError: If the review doesn't exist
            NotOwnerError: If the user neither wrote it nor is admin
            pydantic.ValidationError: If the merged review is invalid
        """
        review = ReviewService.get_review(review_id)
        ensure_owner(review, user, "update", "review")

        updates = updates_from(data)
        if updates:
            merged = ReviewCreate.model_validate({**review, **updates})
            changes = merged.model_dump(mode="json", include=set(updates))
            Database.reviews().update_one({"_id": review["_id"]}, {"$set": changes})
            logger.info(f"Updated review: {review['_id']} fields: {sorted(changes)}")

        return ReviewService.get_review(review["_id"])

    @staticmethod
    def delete_review(review_id: str, user: AuthUser) -> ObjectId:
        """
        Delete a review after an ownership check.

        Returns:
            The id of the reviewed bootcamp

        Raises:
            ReviewNotFoundError: If the review doesn't exist
            NotOwnerError: If the user neither wrote it nor is admin
        """
        review = ReviewService.get_review(review_id)
        ensure_owner(review, user, "delete", "review")

        Database.reviews().delete_one({"_id": review["_id"]})
        logger.info(f"Deleted review: {review['_id']} from bootcamp: {review['bootcamp']}")
        return review["bootcamp"]

# =============================================================================
# core/services/course_service.py - Course Business Logic
# =============================================================================
# Handles course CRUD. Callers are responsible for scheduling
# AggregateService.recalculate_average_cost after every write.
# =============================================================================

import logging
from typing import Any

from bson import ObjectId

from app.exceptions import CourseNotFoundError
from core.models import AuthUser, CourseCreate, CourseUpdate, updates_from
from core.services.bootcamp_service import BOOTCAMP_SUMMARY, BootcampService
from core.services.permissions import ensure_owner
from lib.database import Database
from lib.query_builder import apply_populate
from lib.utils import to_object_id, utcnow

logger = logging.getLogger(__name__)


class CourseService:
    """
    Service for course operations.
    """

    @staticmethod
    def list_for_bootcamp(bootcamp_id: str) -> list[dict[str, Any]]:
        """All courses of one bootcamp, newest first."""
        oid = to_object_id(bootcamp_id)
        return list(Database.courses().find({"bootcamp": oid}).sort("created_at", -1))

    @staticmethod
    def get_course(course_id: str | ObjectId, populate: bool = False) -> dict[str, Any]:
        """
        Get a course by ID, optionally with its bootcamp summary inline.

        Raises:
            CourseNotFoundError: If the course doesn't exist
        """
        course = Database.courses().find_one({"_id": to_object_id(course_id)})
        if not course:
            raise CourseNotFoundError(str(course_id))
        if populate:
            apply_populate(Database.courses(), [course], BOOTCAMP_SUMMARY)
        return course

    @staticmethod
    def create_course(
        bootcamp_id: str,
        data: CourseCreate,
        user: AuthUser,
    ) -> dict[str, Any]:
        """
        Add a course to a bootcamp the user owns (admins may add anywhere).

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            NotOwnerError: If the user neither owns the bootcamp nor is admin
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        ensure_owner(bootcamp, user, "add a course to", "bootcamp")

        document = {
            **data.model_dump(mode="json"),
            "bootcamp": bootcamp["_id"],
            "user": to_object_id(user.id),
            "created_at": utcnow(),
        }
        result = Database.courses().insert_one(document)

        logger.info(f"Created course: {result.inserted_id} in bootcamp: {bootcamp['_id']}")
        return CourseService.get_course(result.inserted_id)

    @staticmethod
    def update_course(course_id: str, data: CourseUpdate, user: AuthUser) -> dict[str, Any]:
        """
        Update a course after an ownership check; the merged course is
        re-validated before it is written.

        Raises:
            CourseNotFoundError: If the course doesn't exist
            NotOwnerError: If the user neither created it nor is admin
            pydantic.ValidationError: If the merged course is invalid
        """
        course = CourseService.get_course(course_id)
        ensure_owner(course, user, "update", "course")

        updates = updates_from(data)
        if updates:
            merged = CourseCreate.model_validate({**course, **updates})
            changes = merged.model_dump(mode="json", include=set(updates))
            Database.courses().update_one({"_id": course["_id"]}, {"$set": changes})
            logger.info(f"Updated course: {course['_id']} fields: {sorted(changes)}")

        return CourseService.get_course(course["_id"])

    @staticmethod
    def delete_course(course_id: str, user: AuthUser) -> ObjectId:
        """
        Delete a course after an ownership check.

        Returns:
            The id of the bootcamp the course belonged to

        Raises:
            CourseNotFoundError: If the course doesn't exist
            NotOwnerError: If the user neither created it nor is admin
        """
        course = CourseService.get_course(course_id)
        ensure_owner(course, user, "delete", "course")

        Database.courses().delete_one({"_id": course["_id"]})
        logger.info(f"Deleted course: {course['_id']} from bootcamp: {course['bootcamp']}")
        return course["bootcamp"]

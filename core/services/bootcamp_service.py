# =============================================================================
# core/services/bootcamp_service.py - Bootcamp Business Logic
# =============================================================================
# Handles bootcamp CRUD, radius search, photo upload and membership.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from pathlib import Path
from typing import Any

from bson import ObjectId

from app.config import settings
from app.exceptions import (
    AlreadyJoinedError,
    AlreadyPublishedError,
    BootcampNotFoundError,
    DependencyFailureError,
    FileUploadError,
    PhotoTooLargeError,
)
from core.models import (
    DEFAULT_PHOTO,
    AuthUser,
    BootcampCreate,
    BootcampFields,
    BootcampUpdate,
    slugify,
    updates_from,
)
from core.services.permissions import ensure_owner
from lib.database import Database
from lib.geocoder import GeocoderError, geocode
from lib.query_builder import Populate
from lib.utils import to_object_id, utcnow

logger = logging.getLogger(__name__)

# Earth radius in miles; $centerSphere takes a radius in radians
EARTH_RADIUS_MILES = 3963

# Courses and reviews are returned with their bootcamp's name and description inline
BOOTCAMP_SUMMARY = Populate(
    "bootcamp",
    "bootcamps",
    local_field="bootcamp",
    select=("name", "description"),
)

# Bootcamp lists carry every course of each bootcamp
BOOTCAMP_COURSES = Populate("courses", "courses", foreign_field="bootcamp", many=True)


def radius_in_radians(distance_miles: float) -> float:
    """Convert a distance in miles to radians on the Earth's surface."""
    return distance_miles / EARTH_RADIUS_MILES


def _geocode_or_fail(address: str) -> dict[str, Any]:
    try:
        return geocode(address).to_geojson()
    except GeocoderError as e:
        raise DependencyFailureError(
            f"Could not geocode address '{address}'",
            details=e.details,
        )


class BootcampService:
    """
    Service for bootcamp operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def get_bootcamp(bootcamp_id: str | ObjectId) -> dict[str, Any]:
        """
        Get a bootcamp by ID.

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            bson.errors.InvalidId: If the id is malformed
        """
        bootcamp = Database.bootcamps().find_one({"_id": to_object_id(bootcamp_id)})
        if not bootcamp:
            raise BootcampNotFoundError(str(bootcamp_id))
        return bootcamp

    @staticmethod
    def create_bootcamp(data: BootcampCreate, user: AuthUser) -> dict[str, Any]:
        """
        Create a bootcamp owned by `user`.

        A non-admin may publish only one bootcamp. The address is geocoded
        into `location` and not stored.

        Raises:
            AlreadyPublishedError: If a non-admin already owns a bootcamp
            DependencyFailureError: If geocoding fails
        """
        user_oid = to_object_id(user.id)

        if not user.is_admin and Database.bootcamps().find_one({"user": user_oid}):
            raise AlreadyPublishedError(user.id)

        fields = data.model_dump(mode="json")
        address = fields.pop("address")

        document = {
            **fields,
            "slug": slugify(fields["name"]),
            "location": _geocode_or_fail(address),
            "average_cost": 0,
            "average_rating": 0,
            "photo": DEFAULT_PHOTO,
            "user": user_oid,
            "joined_users": [],
            "created_at": utcnow(),
        }

        result = Database.bootcamps().insert_one(document)
        logger.info(f"Created bootcamp: {result.inserted_id} for user: {user.id}")
        return BootcampService.get_bootcamp(result.inserted_id)

    @staticmethod
    def update_bootcamp(
        bootcamp_id: str,
        data: BootcampUpdate,
        user: AuthUser,
    ) -> dict[str, Any]:
        """
        Update a bootcamp after an ownership check.

        The stored fields and the update are merged and re-validated as a
        whole. A new name re-slugs; a new address re-geocodes.

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            NotOwnerError: If the user neither owns it nor is admin
            pydantic.ValidationError: If the merged bootcamp is invalid
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        ensure_owner(bootcamp, user, "update", "bootcamp")

        updates = updates_from(data)
        if not updates:
            return bootcamp

        merged = BootcampFields.model_validate({**bootcamp, **updates})
        changes = merged.model_dump(mode="json", include=set(updates), exclude={"address"})

        if "name" in changes:
            changes["slug"] = slugify(changes["name"])
        if merged.address:
            changes["location"] = _geocode_or_fail(merged.address)

        Database.bootcamps().update_one({"_id": bootcamp["_id"]}, {"$set": changes})
        logger.info(f"Updated bootcamp: {bootcamp['_id']} fields: {sorted(changes)}")
        return BootcampService.get_bootcamp(bootcamp["_id"])

    @staticmethod
    def delete_bootcamp(bootcamp_id: str, user: AuthUser) -> None:
        """
        Delete a bootcamp and everything hanging off it.

        Courses and reviews of the bootcamp are deleted and the bootcamp is
        removed from every user's joined list.

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            NotOwnerError: If the user neither owns it nor is admin
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        ensure_owner(bootcamp, user, "delete", "bootcamp")

        oid = bootcamp["_id"]
        courses = Database.courses().delete_many({"bootcamp": oid})
        reviews = Database.reviews().delete_many({"bootcamp": oid})
        Database.users().update_many({"joined_bootcamps": oid}, {"$pull": {"joined_bootcamps": oid}})
        Database.bootcamps().delete_one({"_id": oid})

        logger.info(
            f"Deleted bootcamp: {oid} with {courses.deleted_count} courses "
            f"and {reviews.deleted_count} reviews"
        )

    @staticmethod
    def find_within_radius(zipcode: str, distance_miles: float) -> list[dict[str, Any]]:
        """
        Bootcamps within `distance_miles` of a zipcode.

        Raises:
            DependencyFailureError: If the zipcode cannot be geocoded
        """
        location = _geocode_or_fail(zipcode)
        longitude, latitude = location["coordinates"]
        radius = radius_in_radians(distance_miles)

        query = {
            "location": {
                "$geoWithin": {"$centerSphere": [[longitude, latitude], radius]}
            }
        }
        bootcamps = list(Database.bootcamps().find(query))
        logger.debug(f"{len(bootcamps)} bootcamps within {distance_miles}mi of {zipcode}")
        return bootcamps

    @staticmethod
    def upload_photo(
        bootcamp_id: str,
        user: AuthUser,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> str:
        """
        Store a bootcamp photo as photo_<id><ext> and record the filename.

        Args:
            bootcamp_id: Bootcamp to attach the photo to
            user: Acting principal
            filename: Client filename (only its extension is kept)
            content_type: MIME type reported by the client
            content: File bytes

        Returns:
            The stored filename

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            NotOwnerError: If the user neither owns it nor is admin
            FileUploadError: If the file is missing, not an image, or too big
            DependencyFailureError: If the file cannot be written
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        ensure_owner(bootcamp, user, "update", "bootcamp")

        if not filename or not content:
            raise FileUploadError("Please upload a file")

        if not (content_type or "").startswith("image"):
            raise FileUploadError("Please upload an image file")

        if len(content) > settings.MAX_FILE_UPLOAD:
            raise PhotoTooLargeError(settings.MAX_FILE_UPLOAD)

        photo_name = f"photo_{bootcamp['_id']}{Path(filename).suffix}"
        upload_dir = Path(settings.FILE_UPLOAD_PATH)

        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            (upload_dir / photo_name).write_bytes(content)
        except OSError as e:
            logger.error(f"Photo upload failed for bootcamp {bootcamp['_id']}: {e}")
            raise DependencyFailureError("Problem with file upload")

        Database.bootcamps().update_one({"_id": bootcamp["_id"]}, {"$set": {"photo": photo_name}})
        logger.info(f"Uploaded photo {photo_name} ({len(content)} bytes)")
        return photo_name

    @staticmethod
    def join_bootcamp(bootcamp_id: str, user: AuthUser) -> dict[str, Any]:
        """
        Add the user to the bootcamp's members and the bootcamp to the
        user's joined list. Both sides are written together.

        Raises:
            BootcampNotFoundError: If the bootcamp doesn't exist
            AlreadyJoinedError: If the user is already a member
        """
        bootcamp = BootcampService.get_bootcamp(bootcamp_id)
        user_oid = to_object_id(user.id)

        if user_oid in bootcamp.get("joined_users", []):
            raise AlreadyJoinedError(user.id, str(bootcamp["_id"]))

        Database.bootcamps().update_one(
            {"_id": bootcamp["_id"]}, {"$addToSet": {"joined_users": user_oid}}
        )
        Database.users().update_one(
            {"_id": user_oid}, {"$addToSet": {"joined_bootcamps": bootcamp["_id"]}}
        )

        logger.info(f"User {user.id} joined bootcamp {bootcamp['_id']}")
        return BootcampService.get_bootcamp(bootcamp["_id"])

# =============================================================================
# app/routers/bootcamps.py - Bootcamp Endpoints
# =============================================================================
# Bootcamp CRUD, radius search, photo upload and membership, plus the
# courses and reviews nested under a bootcamp:
#   /bootcamps/{bootcamp_id}/courses
#   /bootcamps/{bootcamp_id}/reviews
#
# Writes to courses and reviews schedule a recalculation of the bootcamp's
# averages as a background task that runs once the response is sent.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, File, Path, UploadFile

from app.auth import AuthUser, authorize
from app.config import settings
from app.dependencies import advanced_results
from app.exceptions import PhotoTooLargeError
from core.models import BOOTCAMP_FIELDS, BootcampCreate, BootcampUpdate, CourseCreate, ReviewCreate
from core.services.aggregate_service import AggregateService
from core.services.bootcamp_service import BOOTCAMP_COURSES, BootcampService
from core.services.course_service import CourseService
from core.services.review_service import ReviewService
from lib.database import BOOTCAMPS
from lib.utils import serialize_document, serialize_documents

router = APIRouter()

BootcampId = Annotated[str, Path(description="Bootcamp id")]


# =============================================================================
# Bootcamps
# =============================================================================

@router.get("")
async def list_bootcamps(
    results: dict = Depends(advanced_results(BOOTCAMPS, BOOTCAMP_FIELDS, (BOOTCAMP_COURSES,))),
):
    """
    List bootcamps with filtering, field selection, sorting and pagination.

    Example: /bootcamps?average_cost[lte]=10000&select=name,careers&sort=-name&page=2
    """
    return results


@router.post("", status_code=201)
async def create_bootcamp(
    body: BootcampCreate,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """
    Create a bootcamp owned by the caller.

    A publisher may publish only one bootcamp.
    """
    bootcamp = BootcampService.create_bootcamp(body, user)
    return {"success": True, "data": serialize_document(bootcamp)}


@router.get("/radius/{zipcode}/{distance}")
async def get_bootcamps_in_radius(
    zipcode: Annotated[str, Path(description="Zipcode at the center of the search")],
    distance: Annotated[float, Path(gt=0, description="Radius in miles")],
):
    """Bootcamps within `distance` miles of a zipcode."""
    bootcamps = BootcampService.find_within_radius(zipcode, distance)
    return {"success": True, "count": len(bootcamps), "data": serialize_documents(bootcamps)}


@router.get("/{bootcamp_id}")
async def get_bootcamp(bootcamp_id: BootcampId):
    """Get a single bootcamp."""
    bootcamp = BootcampService.get_bootcamp(bootcamp_id)
    return {"success": True, "data": serialize_document(bootcamp)}


@router.put("/{bootcamp_id}")
async def update_bootcamp(
    bootcamp_id: BootcampId,
    body: BootcampUpdate,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """Update a bootcamp the caller owns."""
    bootcamp = BootcampService.update_bootcamp(bootcamp_id, body, user)
    return {"success": True, "data": serialize_document(bootcamp)}


@router.delete("/{bootcamp_id}")
async def delete_bootcamp(
    bootcamp_id: BootcampId,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """Delete a bootcamp with its courses and reviews."""
    BootcampService.delete_bootcamp(bootcamp_id, user)
    return {"success": True, "data": {}}


@router.put("/{bootcamp_id}/photo")
async def upload_bootcamp_photo(
    bootcamp_id: BootcampId,
    file: UploadFile | None = File(default=None),
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """
    Upload a bootcamp photo (multipart field `file`).

    Raises:
        400: If no file, not an image, or larger than MAX_FILE_UPLOAD
        500: If the file cannot be written
    """
    if file is None:
        photo = BootcampService.upload_photo(bootcamp_id, user, None, None, b"")
    else:
        # size is known once the multipart body is parsed
        if file.size is not None and file.size > settings.MAX_FILE_UPLOAD:
            raise PhotoTooLargeError(settings.MAX_FILE_UPLOAD)
        content = await file.read()
        photo = BootcampService.upload_photo(
            bootcamp_id, user, file.filename, file.content_type, content
        )
    return {"success": True, "data": photo}


@router.put("/{bootcamp_id}/join")
async def join_bootcamp(
    bootcamp_id: BootcampId,
    user: AuthUser = Depends(authorize("user")),
):
    """Join a bootcamp; members may then review it."""
    bootcamp = BootcampService.join_bootcamp(bootcamp_id, user)
    return {"success": True, "data": serialize_document(bootcamp)}


# =============================================================================
# Nested Courses
# =============================================================================

@router.get("/{bootcamp_id}/courses")
async def list_bootcamp_courses(bootcamp_id: BootcampId):
    """All courses of a bootcamp."""
    courses = CourseService.list_for_bootcamp(bootcamp_id)
    return {"success": True, "count": len(courses), "data": serialize_documents(courses)}


@router.post("/{bootcamp_id}/courses", status_code=201)
async def create_bootcamp_course(
    bootcamp_id: BootcampId,
    body: CourseCreate,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """Add a course to a bootcamp the caller owns."""
    course = CourseService.create_course(bootcamp_id, body, user)
    background_tasks.add_task(AggregateService.recalculate_average_cost, course["bootcamp"])
    return {"success": True, "data": serialize_document(course)}


# =============================================================================
# Nested Reviews
# =============================================================================

@router.get("/{bootcamp_id}/reviews")
async def list_bootcamp_reviews(bootcamp_id: BootcampId):
    """All reviews of a bootcamp."""
    reviews = ReviewService.list_for_bootcamp(bootcamp_id)
    return {"success": True, "count": len(reviews), "data": serialize_documents(reviews)}


@router.post("/{bootcamp_id}/reviews", status_code=201)
async def create_bootcamp_review(
    bootcamp_id: BootcampId,
    body: ReviewCreate,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("user", "admin")),
):
    """Review a bootcamp the caller has joined."""
    review = ReviewService.create_review(bootcamp_id, body, user)
    background_tasks.add_task(AggregateService.recalculate_average_rating, review["bootcamp"])
    return {"success": True, "data": serialize_document(review)}

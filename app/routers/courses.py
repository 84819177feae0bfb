# =============================================================================
# app/routers/courses.py - Course Endpoints
# =============================================================================
# Top-level course endpoints. Creating a course happens under its bootcamp
# (POST /bootcamps/{bootcamp_id}/courses).
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Path

from app.auth import AuthUser, authorize
from app.dependencies import advanced_results
from core.models import COURSE_FIELDS, CourseUpdate
from core.services.aggregate_service import AggregateService
from core.services.bootcamp_service import BOOTCAMP_SUMMARY
from core.services.course_service import CourseService
from lib.database import COURSES
from lib.utils import serialize_document

router = APIRouter()

CourseId = Annotated[str, Path(description="Course id")]


@router.get("")
async def list_courses(
    results: dict = Depends(advanced_results(COURSES, COURSE_FIELDS, (BOOTCAMP_SUMMARY,))),
):
    """List courses; each carries its bootcamp's name and description."""
    return results


@router.get("/{course_id}")
async def get_course(course_id: CourseId):
    """Get a single course with its bootcamp summary."""
    course = CourseService.get_course(course_id, populate=True)
    return {"success": True, "data": serialize_document(course)}


@router.put("/{course_id}")
async def update_course(
    course_id: CourseId,
    body: CourseUpdate,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """Update a course the caller created."""
    course = CourseService.update_course(course_id, body, user)
    background_tasks.add_task(AggregateService.recalculate_average_cost, course["bootcamp"])
    return {"success": True, "data": serialize_document(course)}


@router.delete("/{course_id}")
async def delete_course(
    course_id: CourseId,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("publisher", "admin")),
):
    """Delete a course the caller created."""
    bootcamp_id = CourseService.delete_course(course_id, user)
    background_tasks.add_task(AggregateService.recalculate_average_cost, bootcamp_id)
    return {"success": True, "data": {}}

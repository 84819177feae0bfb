# =============================================================================
# core/models/course.py - Course Schemas
# =============================================================================
# A course belongs to exactly one bootcamp and was created by one user.
# Its tuition feeds the bootcamp's average_cost.
# =============================================================================

from datetime import datetime
from enum import Enum

from bson import ObjectId
from pydantic import Field

from .common import EntityModel


class SkillLevel(str, Enum):
    """Minimum skill a student needs before taking a course."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseCreate(EntityModel):
    """
    Schema for adding a course to a bootcamp.

    Example:
        {
            "title": "Front End Web Development",
            "description": "This course will provide you with all of the essentials...",
            "weeks": 8,
            "tuition": 8000,
            "minimum_skill": "beginner",
            "scholarship_available": true
        }
    """
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    weeks: int = Field(..., ge=1, description="Length of the course in weeks")
    tuition: float = Field(..., ge=0, description="Tuition cost")
    minimum_skill: SkillLevel
    scholarship_available: bool = False


class CourseUpdate(EntityModel):
    """Partial course update."""
    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1)
    weeks: int | None = Field(default=None, ge=1)
    tuition: float | None = Field(default=None, ge=0)
    minimum_skill: SkillLevel | None = None
    scholarship_available: bool | None = None


COURSE_FIELDS: dict[str, type] = {
    "_id": ObjectId,
    "title": str,
    "description": str,
    "weeks": int,
    "tuition": float,
    "minimum_skill": str,
    "scholarship_available": bool,
    "bootcamp": ObjectId,
    "user": ObjectId,
    "created_at": datetime,
}

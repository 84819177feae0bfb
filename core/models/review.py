# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================
# A user may review a bootcamp once. The rating feeds the bootcamp's
# average_rating.
# =============================================================================

from datetime import datetime

from bson import ObjectId
from pydantic import Field

from .common import EntityModel


class ReviewCreate(EntityModel):
    """
    Schema for reviewing a bootcamp.

    Example:
        {"title": "Learned a ton!", "text": "I learned a lot...", "rating": 8}
    """
    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=500)
    rating: int = Field(..., ge=1, le=10, description="Rating between 1 and 10")


class ReviewUpdate(EntityModel):
    """Partial review update."""
    title: str | None = Field(default=None, min_length=1, max_length=100)
    text: str | None = Field(default=None, min_length=1, max_length=500)
    rating: int | None = Field(default=None, ge=1, le=10)


REVIEW_FIELDS: dict[str, type] = {
    "_id": ObjectId,
    "title": str,
    "text": str,
    "rating": int,
    "bootcamp": ObjectId,
    "user": ObjectId,
    "created_at": datetime,
}

# =============================================================================
# app/routers/reviews.py - Review Endpoints
# =============================================================================
# Top-level review endpoints. Creating a review happens under its bootcamp
# (POST /bootcamps/{bootcamp_id}/reviews).
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Path

from app.auth import AuthUser, authorize
from app.dependencies import advanced_results
from core.models import REVIEW_FIELDS, ReviewUpdate
from core.services.aggregate_service import AggregateService
from core.services.bootcamp_service import BOOTCAMP_SUMMARY
from core.services.review_service import ReviewService
from lib.database import REVIEWS
from lib.utils import serialize_document

router = APIRouter()

ReviewId = Annotated[str, Path(description="Review id")]


@router.get("")
async def list_reviews(
    results: dict = Depends(advanced_results(REVIEWS, REVIEW_FIELDS, (BOOTCAMP_SUMMARY,))),
):
    """List reviews; each carries its bootcamp's name and description."""
    return results


@router.get("/{review_id}")
async def get_review(review_id: ReviewId):
    """Get a single review with its bootcamp summary."""
    review = ReviewService.get_review(review_id, populate=True)
    return {"success": True, "data": serialize_document(review)}


@router.put("/{review_id}")
async def update_review(
    review_id: ReviewId,
    body: ReviewUpdate,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("user", "admin")),
):
    """Update a review the caller wrote."""
    review = ReviewService.update_review(review_id, body, user)
    background_tasks.add_task(AggregateService.recalculate_average_rating, review["bootcamp"])
    return {"success": True, "data": serialize_document(review)}


@router.delete("/{review_id}")
async def delete_review(
    review_id: ReviewId,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(authorize("user", "admin")),
):
    """Delete a review the caller wrote."""
    bootcamp_id = ReviewService.delete_review(review_id, user)
    background_tasks.add_task(AggregateService.recalculate_average_rating, bootcamp_id)
    return {"success": True, "data": {}}

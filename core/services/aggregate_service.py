# =============================================================================
# core/services/aggregate_service.py - Derived Bootcamp Averages
# =============================================================================
# Recomputes a bootcamp's average_cost (from its courses' tuition) and
# average_rating (from its reviews' rating).
#
# Routers schedule these as background tasks after a course/review write
# completes, so the response never waits on them and a deleted child is
# already gone from the aggregation. Failures are logged and swallowed:
# a recalculation problem must never fail the write that triggered it.
# =============================================================================

import logging
import math
from typing import Any

from bson import ObjectId
from pymongo.collection import Collection

from lib.database import Database
from lib.utils import to_object_id

logger = logging.getLogger(__name__)


def round_cost(mean: float) -> int:
    """Round an average tuition up to the next multiple of 10."""
    return int(math.ceil(mean / 10) * 10)


def _mean_for_bootcamp(
    collection: Collection,
    bootcamp_id: ObjectId,
    field: str,
) -> float | None:
    """
    Mean of `field` over a bootcamp's children, or None when it has none.
    """
    pipeline: list[dict[str, Any]] = [
        {"$match": {"bootcamp": bootcamp_id}},
        {"$group": {"_id": "$bootcamp", "average": {"$avg": f"${field}"}}},
    ]
    results = list(collection.aggregate(pipeline))
    if not results or results[0].get("average") is None:
        return None
    return float(results[0]["average"])


class AggregateService:
    """
    Service for recomputing derived bootcamp fields.

    Both methods are safe to run fire-and-forget: they never raise.
    """

    @staticmethod
    def recalculate_average_cost(bootcamp_id: str | ObjectId) -> None:
        """
        Set average_cost to the mean course tuition rounded up to 10, or 0.
        """
        try:
            oid = to_object_id(bootcamp_id)
            mean = _mean_for_bootcamp(Database.courses(), oid, "tuition")
            average_cost = 0 if mean is None else round_cost(mean)

            Database.bootcamps().update_one({"_id": oid}, {"$set": {"average_cost": average_cost}})
            logger.info(f"Bootcamp {oid} average_cost -> {average_cost}")

        except Exception as e:
            logger.exception(f"Failed to recalculate average cost for bootcamp {bootcamp_id}: {e}")

    @staticmethod
    def recalculate_average_rating(bootcamp_id: str | ObjectId) -> None:
        """
        Set average_rating to the raw mean review rating, or 0.
        """
        try:
            oid = to_object_id(bootcamp_id)
            mean = _mean_for_bootcamp(Database.reviews(), oid, "rating")
            average_rating = 0 if mean is None else mean

            Database.bootcamps().update_one({"_id": oid}, {"$set": {"average_rating": average_rating}})
            logger.info(f"Bootcamp {oid} average_rating -> {average_rating}")

        except Exception as e:
            logger.exception(f"Failed to recalculate average rating for bootcamp {bootcamp_id}: {e}")

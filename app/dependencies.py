# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# advanced_results() builds a per-collection dependency that runs the query
# builder against the request's query string:
#
#   @router.get("")
#   async def list_courses(results: dict = Depends(advanced_results(COURSES, COURSE_FIELDS))):
#       return results
# =============================================================================

from collections.abc import Mapping, Sequence
from typing import Any, Callable

from fastapi import Request

from app.exceptions import ValidationFailedError
from lib.database import Database
from lib.query_builder import Populate, QueryBuilderError, build_advanced_results


def advanced_results(
    collection_name: str,
    field_types: Mapping[str, type],
    populate: Sequence[Populate] = (),
) -> Callable[[Request], dict[str, Any]]:
    """
    Build a list dependency for one collection.

    Args:
        collection_name: Target collection
        field_types: Filterable fields and their types
        populate: Relations to expand inline

    Returns:
        Dependency returning the list envelope
    """

    def dependency(request: Request) -> dict[str, Any]:
        try:
            return build_advanced_results(
                Database.collection(collection_name),
                dict(request.query_params),
                field_types,
                populate,
            )
        except QueryBuilderError as e:
            raise ValidationFailedError([e.message])

    return dependency

# =============================================================================
# lib/query_builder.py - Advanced Results (filter / select / sort / paginate)
# =============================================================================
# Turns a raw query-string mapping into a MongoDB read and shapes the result
# into the list envelope used by every list endpoint:
#
#   {"success": true, "count": 2, "pagination": {"next": {...}}, "data": [...]}
#
# Query string conventions:
#   select=name,description          -> projection
#   sort=-average_cost,name          -> sort (leading "-" = descending)
#   page=2&limit=10                  -> pagination (defaults 1 and 25)
#   average_cost[lte]=10000          -> {"average_cost": {"$lte": 10000}}
#   careers[in]=Business,UI/UX       -> {"careers": {"$in": ["Business", "UI/UX"]}}
#   housing=true                     -> {"housing": True}
#
# Operators come from a fixed whitelist and values are coerced to the type
# declared for the field. Keys naming no known field are passed through as
# string equality filters (they simply match nothing).
#
# Usage:
#   from lib.query_builder import build_advanced_results
#   envelope = build_advanced_results(Database.bootcamps(), {"page": "2"}, BOOTCAMP_FIELDS)
# =============================================================================

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

from lib.utils import ApplicationError, serialize_documents

logger = logging.getLogger(__name__)


CONTROL_PARAMS = frozenset({"select", "sort", "page", "limit"})

COMPARISON_OPERATORS = {
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "in": "$in",
}

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
DEFAULT_SORT = "-created_at"

# field[op]=value
_OPERATOR_KEY = re.compile(r"^(?P<field>[A-Za-z_][\w.]*)\[(?P<op>[^\]]*)\]$")

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class QueryBuilderError(ApplicationError):
    """Raised when a query string cannot be turned into a valid query."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="INVALID_QUERY", **kwargs)


@dataclass(frozen=True)
class Populate:
    """
    Relation expansion applied to list results.

    Forward reference (one related document replaces an id):
        Populate("bootcamp", "bootcamps", local_field="bootcamp", select=("name", "description"))

    Reverse list (all documents pointing back at this one):
        Populate("courses", "courses", foreign_field="bootcamp", many=True)
    """
    path: str
    collection: str
    local_field: str = "_id"
    foreign_field: str = "_id"
    select: tuple[str, ...] = ()
    many: bool = False


# =============================================================================
# Parsing
# =============================================================================

def coerce_value(raw: str, field_type: type) -> Any:
    """
    Convert a query-string value to the type declared for its field.

    Raises:
        QueryBuilderError: If the value does not fit the type
    """
    try:
        if field_type is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(raw)
        if field_type is int:
            return int(raw)
        if field_type is float:
            return float(raw)
        if field_type is ObjectId:
            return ObjectId(raw)
        if field_type is datetime:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (ValueError, InvalidId, TypeError):
        raise QueryBuilderError(
            f"Invalid value {raw!r} for a {field_type.__name__} field",
            details={"value": raw},
        )
    return raw


def parse_filters(
    query_params: Mapping[str, str],
    field_types: Mapping[str, type],
) -> dict[str, Any]:
    """
    Build a MongoDB filter from every non-control query parameter.

    Args:
        query_params: Raw query string mapping
        field_types: Known fields of the target entity and their types

    Returns:
        MongoDB filter document

    Raises:
        QueryBuilderError: For a key containing '$', an operator outside
            the whitelist, or a value that cannot be coerced to its field's type
    """
    filters: dict[str, Any] = {}

    for key, raw in query_params.items():
        if key in CONTROL_PARAMS:
            continue

        if "$" in key:
            raise QueryBuilderError(
                f"Invalid filter field '{key}'",
                suggestion="Filter on document fields, e.g. average_cost[lte]=10000",
                details={"field": key},
            )

        match = _OPERATOR_KEY.match(key)
        if not match:
            field_type = field_types.get(key)
            filters[key] = coerce_value(raw, field_type) if field_type else raw
            continue

        field, op = match.group("field"), match.group("op")
        if op not in COMPARISON_OPERATORS:
            raise QueryBuilderError(
                f"Unsupported filter operator '{op}' on '{field}'",
                suggestion=f"Use one of: {', '.join(COMPARISON_OPERATORS)}",
                details={"field": field, "operator": op},
            )

        field_type = field_types.get(field, str)
        if op == "in":
            value: Any = [coerce_value(item.strip(), field_type) for item in raw.split(",") if item.strip()]
        else:
            value = coerce_value(raw, field_type)

        predicate = filters.setdefault(field, {})
        if not isinstance(predicate, dict):
            # field=x and field[gt]=y together: the equality wins
            continue
        predicate[COMPARISON_OPERATORS[op]] = value

    return filters


def parse_projection(select: str | None) -> dict[str, int] | None:
    """'name,description' -> {'name': 1, 'description': 1}"""
    if not select:
        return None
    fields = [field.strip() for field in select.split(",") if field.strip()]
    return {field: 1 for field in fields} or None


def parse_sort(sort: str | None) -> list[tuple[str, int]]:
    """'-average_cost,name' -> [('average_cost', -1), ('name', 1)]"""
    keys: list[tuple[str, int]] = []
    for field in (sort or DEFAULT_SORT).split(","):
        field = field.strip()
        if not field or field == "-":
            continue
        if field.startswith("-"):
            keys.append((field[1:], DESCENDING))
        else:
            keys.append((field, ASCENDING))
    if not keys:
        return parse_sort(DEFAULT_SORT)
    return keys


def parse_positive_int(raw: str | None, default: int) -> int:
    """Parse page/limit; anything missing, non-numeric or < 1 falls back to the default."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value >= 1 else default


# =============================================================================
# Relation Expansion
# =============================================================================

def apply_populate(
    collection: Collection,
    docs: list[dict[str, Any]],
    populate: Populate,
) -> None:
    """
    Resolve a relation in place for a page of documents.

    One query per relation: ids are collected from the page and fetched
    together with $in.
    """
    keys = [doc[populate.local_field] for doc in docs if doc.get(populate.local_field) is not None]
    if not keys:
        return

    projection = None
    if populate.select:
        projection = {field: 1 for field in populate.select}
        projection[populate.foreign_field] = 1

    related_collection = collection.database[populate.collection]
    related = list(related_collection.find({populate.foreign_field: {"$in": keys}}, projection))

    if populate.many:
        grouped: dict[Any, list[dict[str, Any]]] = {}
        for item in related:
            grouped.setdefault(item.get(populate.foreign_field), []).append(item)
        for doc in docs:
            doc[populate.path] = grouped.get(doc.get(populate.local_field), [])
    else:
        indexed = {item.get(populate.foreign_field): item for item in related}
        for doc in docs:
            if populate.local_field in doc:
                doc[populate.path] = indexed.get(doc[populate.local_field])


# =============================================================================
# Main Entry Point
# =============================================================================

def build_pagination(page: int, limit: int, total: int) -> dict[str, dict[str, int]]:
    """
    next/prev links for a page.

    `total` is the size of the whole collection (or of the scoped list),
    not of the filtered set.
    """
    start_index = (page - 1) * limit
    end_index = page * limit

    pagination: dict[str, dict[str, int]] = {}
    if end_index < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if start_index > 0:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return pagination


def build_advanced_results(
    collection: Collection,
    query_params: Mapping[str, str],
    field_types: Mapping[str, type],
    populate: Sequence[Populate] = (),
    base_filter: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Run a filtered, sorted, paginated, field-limited read.

    Args:
        collection: Target collection
        query_params: Raw query string mapping
        field_types: Known fields of the entity and their types
        populate: Relations to expand inline
        base_filter: Filter every result must also match (scopes the list)

    Returns:
        Envelope dict: success, count, pagination, data

    Raises:
        QueryBuilderError: If the query string is invalid
    """
    scope = dict(base_filter or {})
    filters = {**parse_filters(query_params, field_types), **scope}
    projection = parse_projection(query_params.get("select"))
    sort = parse_sort(query_params.get("sort"))
    page = parse_positive_int(query_params.get("page"), DEFAULT_PAGE)
    limit = parse_positive_int(query_params.get("limit"), DEFAULT_LIMIT)

    start_index = (page - 1) * limit
    total = collection.count_documents(scope)

    cursor = collection.find(filters, projection).sort(sort).skip(start_index).limit(limit)
    docs = list(cursor)

    for relation in populate:
        apply_populate(collection, docs, relation)

    logger.debug(
        f"{collection.name}: filter={filters} page={page} limit={limit} "
        f"returned={len(docs)} total={total}"
    )

    return {
        "success": True,
        "count": len(docs),
        "pagination": build_pagination(page, limit, total),
        "data": serialize_documents(docs),
    }

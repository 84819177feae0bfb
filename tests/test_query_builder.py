# =============================================================================
# tests/test_query_builder.py - Advanced Results Tests
# =============================================================================
# Unit tests for lib/query_builder.py:
# - query-string parsing (filters, operators, coercion, select, sort, paging)
# - pagination links
# - the full read against an in-memory collection, including populate
#
# Run with: pytest tests/test_query_builder.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from core.models import BOOTCAMP_FIELDS, COURSE_FIELDS
from lib.query_builder import (
    DEFAULT_LIMIT,
    Populate,
    QueryBuilderError,
    build_advanced_results,
    build_pagination,
    coerce_value,
    parse_filters,
    parse_positive_int,
    parse_projection,
    parse_sort,
)


# =============================================================================
# Parsing
# =============================================================================

class TestCoerceValue:
    """Tests for typed coercion of query-string values."""

    def test_numbers(self):
        assert coerce_value("10000", float) == 10000.0
        assert coerce_value("8", int) == 8

    @pytest.mark.parametrize("raw,expected", [("true", True), ("False", False), ("1", True), ("no", False)])
    def test_booleans(self, raw, expected):
        assert coerce_value(raw, bool) is expected

    def test_object_id(self):
        oid = ObjectId()
        assert coerce_value(str(oid), ObjectId) == oid

    def test_string_passthrough(self):
        assert coerce_value("Boston", str) == "Boston"

    @pytest.mark.parametrize("raw,field_type", [("abc", float), ("1.5", int), ("maybe", bool), ("xyz", ObjectId)])
    def test_bad_values_raise(self, raw, field_type):
        with pytest.raises(QueryBuilderError):
            coerce_value(raw, field_type)


class TestParseFilters:
    """Tests for turning query parameters into a MongoDB filter."""

    def test_comparison_operator(self):
        filters = parse_filters({"average_cost[lte]": "10000"}, BOOTCAMP_FIELDS)
        assert filters == {"average_cost": {"$lte": 10000.0}}

    def test_multiple_operators_on_one_field(self):
        filters = parse_filters({"tuition[gte]": "1000", "tuition[lt]": "9000"}, COURSE_FIELDS)
        assert filters == {"tuition": {"$gte": 1000.0, "$lt": 9000.0}}

    def test_in_operator_splits_commas(self):
        filters = parse_filters({"careers[in]": "Business,UI/UX"}, BOOTCAMP_FIELDS)
        assert filters == {"careers": {"$in": ["Business", "UI/UX"]}}

    def test_plain_equality_is_typed(self):
        filters = parse_filters({"housing": "true", "location.state": "MA"}, BOOTCAMP_FIELDS)
        assert filters == {"housing": True, "location.state": "MA"}

    def test_control_params_are_not_filters(self):
        filters = parse_filters(
            {"select": "name", "sort": "-name", "page": "2", "limit": "5"},
            BOOTCAMP_FIELDS,
        )
        assert filters == {}

    def test_unknown_field_passes_through_as_string(self):
        filters = parse_filters({"flavor": "vanilla"}, BOOTCAMP_FIELDS)
        assert filters == {"flavor": "vanilla"}

    def test_unknown_operator_rejected(self):
        with pytest.raises(QueryBuilderError) as exc_info:
            parse_filters({"average_cost[where]": "1"}, BOOTCAMP_FIELDS)
        assert "where" in exc_info.value.message

    def test_bad_typed_value_rejected(self):
        with pytest.raises(QueryBuilderError):
            parse_filters({"average_cost[gt]": "cheap"}, BOOTCAMP_FIELDS)

    @pytest.mark.parametrize("key", [
        "$where",
        "$expr",
        "location.$**",
        "$or[in]",
        "average_cost.$[gt]",
    ])
    def test_operator_keys_rejected(self, key):
        with pytest.raises(QueryBuilderError) as exc_info:
            parse_filters({key: "sleep(5000) || true", "name": "x"}, BOOTCAMP_FIELDS)
        assert key in exc_info.value.message

    def test_operator_key_on_list_route_is_400(self, client):
        response = client.get("/api/v1/bootcamps", params={"$where": "sleep(5000) || true"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid filter field '$where'"}


class TestSelectSortPaging:

    def test_projection(self):
        assert parse_projection("name, description") == {"name": 1, "description": 1}
        assert parse_projection(None) is None
        assert parse_projection(" , ") is None

    def test_sort(self):
        assert parse_sort("-average_cost,name") == [("average_cost", DESCENDING), ("name", ASCENDING)]

    def test_default_sort_is_newest_first(self):
        assert parse_sort(None) == [("created_at", DESCENDING)]
        assert parse_sort(",") == [("created_at", DESCENDING)]

    @pytest.mark.parametrize("raw,expected", [(None, 7), ("3", 3), ("0", 7), ("-2", 7), ("abc", 7)])
    def test_positive_int(self, raw, expected):
        assert parse_positive_int(raw, 7) == expected


class TestBuildPagination:

    def test_first_page_has_only_next(self):
        assert build_pagination(1, 2, 5) == {"next": {"page": 2, "limit": 2}}

    def test_middle_page_has_both(self):
        assert build_pagination(2, 2, 5) == {
            "next": {"page": 3, "limit": 2},
            "prev": {"page": 1, "limit": 2},
        }

    def test_last_page_has_only_prev(self):
        assert build_pagination(3, 2, 5) == {"prev": {"page": 2, "limit": 2}}

    def test_single_page_is_empty(self):
        assert build_pagination(1, 25, 3) == {}


# =============================================================================
# Full Read
# =============================================================================

@pytest.fixture
def seeded(db):
    """Five bootcamps (oldest first) and two courses for the first one."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = []
    for i in range(5):
        result = db.bootcamps.insert_one({
            "name": f"Camp {i}",
            "description": f"Bootcamp number {i}",
            "average_cost": 1000 * (i + 1),
            "housing": i % 2 == 0,
            "careers": ["Business"] if i < 2 else ["Other"],
            "created_at": base + timedelta(days=i),
        })
        ids.append(result.inserted_id)

    db.courses.insert_many([
        {"title": "Course A", "tuition": 100, "bootcamp": ids[0], "created_at": base},
        {"title": "Course B", "tuition": 200, "bootcamp": ids[0], "created_at": base},
    ])
    return ids


class TestBuildAdvancedResults:

    def test_default_envelope(self, db, seeded):
        result = build_advanced_results(db.bootcamps, {}, BOOTCAMP_FIELDS)

        assert result["success"] is True
        assert result["count"] == 5
        assert result["pagination"] == {}
        # Newest first by default
        assert [b["name"] for b in result["data"]] == ["Camp 4", "Camp 3", "Camp 2", "Camp 1", "Camp 0"]
        assert all("_id" not in b and "id" in b for b in result["data"])

    def test_filter_and_sort(self, db, seeded):
        result = build_advanced_results(
            db.bootcamps,
            {"average_cost[lte]": "3000", "sort": "average_cost"},
            BOOTCAMP_FIELDS,
        )
        assert [b["average_cost"] for b in result["data"]] == [1000, 2000, 3000]

    def test_in_filter_on_array_field(self, db, seeded):
        result = build_advanced_results(db.bootcamps, {"careers[in]": "Business"}, BOOTCAMP_FIELDS)
        assert {b["name"] for b in result["data"]} == {"Camp 0", "Camp 1"}

    def test_select_limits_fields(self, db, seeded):
        result = build_advanced_results(db.bootcamps, {"select": "name"}, BOOTCAMP_FIELDS)
        assert set(result["data"][0]) == {"id", "name"}

    def test_page_size_bounds_data(self, db, seeded):
        result = build_advanced_results(
            db.bootcamps,
            {"page": "2", "limit": "2", "sort": "name"},
            BOOTCAMP_FIELDS,
        )
        assert result["count"] == 2
        assert len(result["data"]) <= 2
        assert [b["name"] for b in result["data"]] == ["Camp 2", "Camp 3"]
        assert result["pagination"] == {
            "next": {"page": 3, "limit": 2},
            "prev": {"page": 1, "limit": 2},
        }

    def test_pagination_total_ignores_filters(self, db, seeded):
        # Only two documents match, but next is computed from all five
        result = build_advanced_results(
            db.bootcamps,
            {"careers[in]": "Business", "limit": "2"},
            BOOTCAMP_FIELDS,
        )
        assert result["count"] == 2
        assert result["pagination"] == {"next": {"page": 2, "limit": 2}}

    def test_bad_page_falls_back_to_defaults(self, db, seeded):
        result = build_advanced_results(db.bootcamps, {"page": "zero", "limit": "-1"}, BOOTCAMP_FIELDS)
        assert result["count"] == 5
        assert DEFAULT_LIMIT == 25

    def test_unknown_field_matches_nothing(self, db, seeded):
        result = build_advanced_results(db.bootcamps, {"flavor": "vanilla"}, BOOTCAMP_FIELDS)
        assert result["count"] == 0
        assert result["data"] == []

    def test_base_filter_scopes_results(self, db, seeded):
        result = build_advanced_results(
            db.courses,
            {},
            COURSE_FIELDS,
            base_filter={"bootcamp": seeded[0]},
        )
        assert result["count"] == 2

    def test_populate_reverse_list(self, db, seeded):
        courses = Populate("courses", "courses", foreign_field="bootcamp", many=True)
        result = build_advanced_results(db.bootcamps, {"sort": "name"}, BOOTCAMP_FIELDS, (courses,))

        first, second = result["data"][0], result["data"][1]
        assert sorted(c["title"] for c in first["courses"]) == ["Course A", "Course B"]
        assert second["courses"] == []

    def test_populate_forward_reference(self, db, seeded):
        summary = Populate("bootcamp", "bootcamps", local_field="bootcamp", select=("name", "description"))
        result = build_advanced_results(db.courses, {}, COURSE_FIELDS, (summary,))

        bootcamp = result["data"][0]["bootcamp"]
        assert bootcamp == {"id": str(seeded[0]), "name": "Camp 0", "description": "Bootcamp number 0"}

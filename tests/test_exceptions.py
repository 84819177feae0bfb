# =============================================================================
# tests/test_exceptions.py - Error Envelope and Health Endpoint Tests
# =============================================================================
# Tests that every failure reaches the client as
#   {"success": false, "error": "..."}
# plus the health endpoints mounted at /api/v1.
#
# Run with: pytest tests/test_exceptions.py -v
# =============================================================================

from unittest.mock import patch

from bson import ObjectId
from fastapi.testclient import TestClient

from app.exceptions import (
    BootcampNotFoundError,
    NotOwnerError,
    ValidationFailedError,
    format_validation_errors,
)
from app.main import app
from core.services.bootcamp_service import BootcampService


# =============================================================================
# Exception Classes
# =============================================================================

class TestExceptionClasses:

    def test_not_found_message(self):
        exc = BootcampNotFoundError("abc")

        assert exc.status_code == 404
        assert exc.to_dict() == {"success": False, "error": "Bootcamp not found with id of abc"}

    def test_validation_failed_joins_messages(self):
        exc = ValidationFailedError(["name: required", "careers: required"])

        assert exc.status_code == 400
        assert exc.message == "name: required, careers: required"

    def test_not_owner_message(self):
        exc = NotOwnerError("u1", "update", "bootcamp", "b1")

        assert exc.status_code == 403
        assert exc.message == "User u1 is not authorized to update bootcamp b1"


class TestFormatValidationErrors:

    def test_request_section_dropped(self):
        errors = [{"loc": ("body", "rating"), "msg": "Input should be less than or equal to 10"}]

        assert format_validation_errors(errors) == ["rating: Input should be less than or equal to 10"]

    def test_nested_location_dotted(self):
        errors = [{"loc": ("body", "careers", 0), "msg": "Input should be 'Web Development'"}]

        assert format_validation_errors(errors)[0].startswith("careers.0: ")

    def test_value_error_prefix_removed(self):
        errors = [{"loc": ("role",), "msg": "Value error, Role must be user or publisher"}]

        assert format_validation_errors(errors) == ["role: Role must be user or publisher"]

    def test_no_location(self):
        assert format_validation_errors([{"loc": ("body",), "msg": "Field required"}]) == ["Field required"]


# =============================================================================
# Handlers
# =============================================================================

class TestHandlers:

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}

    def test_wrong_method(self, client):
        response = client.patch("/api/v1/bootcamps")

        assert response.status_code == 405
        assert response.json()["success"] is False

    def test_malformed_id(self, client):
        response = client.get("/api/v1/courses/not-an-object-id")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Resource not found"}

    def test_invalid_json_body(self, client, publisher):
        response = client.post(
            "/api/v1/bootcamps",
            content="{not json",
            headers={**publisher.headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unexpected_error_is_500(self):
        client = TestClient(app, raise_server_exceptions=False)

        with patch.object(BootcampService, "get_bootcamp", side_effect=RuntimeError("boom")):
            response = client.get(f"/api/v1/bootcamps/{ObjectId()}")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Server Error"}


# =============================================================================
# Health Endpoints
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["environment"] == "development"
        assert body["version"] == "1.0.0"

    def test_ready(self, client, upload_dir):
        with patch("app.routers.health.Database.ping", return_value=True):
            response = client.get("/api/v1/health/ready")

        assert response.json()["status"] == "ready"
        assert response.json()["checks"] == {"database": "healthy", "uploads": "healthy"}
        assert upload_dir.is_dir()

    def test_degraded_when_database_down(self, client):
        with patch("app.routers.health.Database.ping", side_effect=RuntimeError("connection refused")):
            response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["database"].startswith("unhealthy")

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_root(self, client):
        body = client.get("/").json()
        assert body["version"] == "1.0.0"

# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Swaps the MongoDB client for an in-memory mongomock client
# - Stubs the geocoding provider so no test touches the network
# - Builds accounts of each role with ready-to-use auth headers
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "devcamper_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-test-suite")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from dataclasses import dataclass
from unittest.mock import patch

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from core.models import Role, UserCreate
from core.services.user_service import UserService
from lib.database import Database
from lib.geocoder import GeoLocation
from lib.security import create_access_token

DEFAULT_PASSWORD = "123456"

BOSTON = GeoLocation(
    latitude=42.350846,
    longitude=-71.105286,
    formatted_address="233 Bay State Rd, Boston, MA 02215, US",
    street="233 Bay State Rd",
    city="Boston",
    state="MA",
    zipcode="02215",
    country="US",
)


@dataclass
class Account:
    """A stored user plus a valid token for it."""
    id: str
    email: str
    role: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


# =============================================================================
# Infrastructure Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def db(monkeypatch):
    """Fresh in-memory database with the production indexes for every test."""
    client = mongomock.MongoClient(tz_aware=True)
    monkeypatch.setattr(Database, "_client", client)
    Database.ensure_indexes()
    yield client[settings.DATABASE_NAME]


@pytest.fixture(autouse=True)
def fake_geocode():
    """Every address geocodes to Boston unless a test overrides it."""
    with patch("core.services.bootcamp_service.geocode", return_value=BOSTON) as mock:
        yield mock


@pytest.fixture(autouse=True)
def upload_dir(monkeypatch, tmp_path):
    """Photo uploads land in a per-test temporary directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "FILE_UPLOAD_PATH", str(path))
    return path


@pytest.fixture
def client():
    """HTTP client for the app. The lifespan is not run; `db` sets up the store."""
    return TestClient(app)


# =============================================================================
# Account Fixtures
# =============================================================================

@pytest.fixture
def make_account():
    """Factory: create a user with the given role and return an Account."""
    counter = {"n": 0}

    def _make(role: str = "user", email: str | None = None, name: str | None = None) -> Account:
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        document = UserService.create_user(UserCreate(
            name=name or f"{role.title()} {counter['n']}",
            email=email,
            password=DEFAULT_PASSWORD,
            role=Role(role),
        ))
        user_id = str(document["_id"])
        return Account(id=user_id, email=email, role=role, token=create_access_token(user_id))

    return _make


@pytest.fixture
def user(make_account) -> Account:
    return make_account("user")


@pytest.fixture
def publisher(make_account) -> Account:
    return make_account("publisher")


@pytest.fixture
def admin(make_account) -> Account:
    return make_account("admin")


# =============================================================================
# Sample Payloads
# =============================================================================

@pytest.fixture
def bootcamp_payload():
    """Valid body for POST /bootcamps."""
    return {
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
    }


@pytest.fixture
def course_payload():
    """Valid body for POST /bootcamps/{id}/courses."""
    return {
        "title": "Front End Web Development",
        "description": "HTML, CSS and JavaScript",
        "weeks": 8,
        "tuition": 8000,
        "minimum_skill": "beginner",
        "scholarship_available": True,
    }


@pytest.fixture
def review_payload():
    """Valid body for POST /bootcamps/{id}/reviews."""
    return {"title": "Learned a ton!", "text": "Great teachers and projects", "rating": 8}


@pytest.fixture
def create_bootcamp(client, bootcamp_payload):
    """Factory: create a bootcamp through the API and return its JSON."""

    def _create(account: Account, **overrides) -> dict:
        response = client.post(
            "/api/v1/bootcamps",
            json={**bootcamp_payload, **overrides},
            headers=account.headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create

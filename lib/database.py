# =============================================================================
# lib/database.py - MongoDB Client Wrapper
# =============================================================================
# This module provides a typed wrapper around the pymongo client.
# It implements the singleton pattern to reuse a single client connection
# and exposes the collections used by the API:
# - bootcamps
# - courses
# - reviews
# - users
#
# Usage:
#   from lib.database import Database
#   bootcamp = Database.bootcamps().find_one({"_id": bootcamp_id})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from pymongo import ASCENDING, GEOSPHERE, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database as MongoDatabase

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)


BOOTCAMPS = "bootcamps"
COURSES = "courses"
REVIEWS = "reviews"
USERS = "users"


class DatabaseError(Exception):
    """
    Error while connecting to or preparing the database.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "DATABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class Database:
    """
    Typed wrapper for MongoDB access.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        users = Database.users()
        user = users.find_one({"email": "john@gmail.com"})
    """

    _client: MongoClient | None = None

    @classmethod
    def get_client(cls) -> MongoClient:
        """
        Get or create the singleton MongoClient.

        Returns:
            MongoClient: pymongo client instance

        Raises:
            DatabaseError: If client creation fails
        """
        if cls._client is None:
            try:
                cls._client = MongoClient(settings.MONGO_URI, tz_aware=True)
                logger.info("MongoDB client initialized successfully")
            except Exception as e:
                raise DatabaseError(
                    message=f"Failed to create MongoDB client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check MONGO_URI in your .env file"
                )
        return cls._client

    @classmethod
    def get_database(cls) -> MongoDatabase:
        """Get the application database."""
        return cls.get_client()[settings.DATABASE_NAME]

    @classmethod
    def collection(cls, name: str) -> Collection:
        """Get a collection by name."""
        return cls.get_database()[name]

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @classmethod
    def bootcamps(cls) -> Collection:
        return cls.collection(BOOTCAMPS)

    @classmethod
    def courses(cls) -> Collection:
        return cls.collection(COURSES)

    @classmethod
    def reviews(cls) -> Collection:
        return cls.collection(REVIEWS)

    @classmethod
    def users(cls) -> Collection:
        return cls.collection(USERS)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    @classmethod
    def ensure_indexes(cls) -> None:
        """
        Create the indexes the API relies on.

        - users.email unique
        - bootcamps.name unique, bootcamps.location 2dsphere
        - reviews (bootcamp, user) unique: one review per user per bootcamp

        Raises:
            DatabaseError: If an index cannot be created
        """
        try:
            cls.users().create_index([("email", ASCENDING)], unique=True)
            cls.bootcamps().create_index([("name", ASCENDING)], unique=True)
            cls.bootcamps().create_index([("location", GEOSPHERE)])
            cls.courses().create_index([("bootcamp", ASCENDING)])
            cls.reviews().create_index(
                [("bootcamp", ASCENDING), ("user", ASCENDING)],
                unique=True,
            )
            logger.info("MongoDB indexes ensured")
        except Exception as e:
            raise DatabaseError(
                message=f"Failed to create indexes: {e}",
                code="INDEX_CREATION_FAILED",
                suggestion="Check for existing duplicate documents and database permissions"
            )

    @classmethod
    def ping(cls) -> bool:
        """Return True when the server answers a ping."""
        cls.get_client().admin.command("ping")
        return True

    @classmethod
    def close(cls) -> None:
        """Close the client connection."""
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logger.info("MongoDB client closed")

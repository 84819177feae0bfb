# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ObjectId parsing and normalization
# - Converting MongoDB documents into JSON-ready dicts
# - Base error class for library-level failures
# =============================================================================

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId


# Fields that never leave the server, whatever projection was requested.
HIDDEN_FIELDS = frozenset({"password", "reset_password_token", "reset_password_expire"})


# =============================================================================
# ObjectId Utilities
# =============================================================================

def to_object_id(value: str | ObjectId) -> ObjectId:
    """
    Parse a 24-character hex string into an ObjectId.

    Raises:
        bson.errors.InvalidId: If the value is not a valid ObjectId.
            The exception handlers map this to a 404 "Resource not found".

    Example:
        bootcamp_id = to_object_id("5d713995b721c3bb38c1f5d0")
    """
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def utcnow() -> datetime:
    """Current UTC time, truncated to milliseconds like MongoDB stores it."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


# =============================================================================
# Document Serialization
# =============================================================================

def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value


def serialize_document(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Convert a MongoDB document into a JSON-ready dict.

    - `_id` becomes `id` (string)
    - nested ObjectIds become strings, datetimes become ISO strings
    - password and reset-token fields are dropped

    Args:
        doc: Raw document from pymongo (or None)

    Returns:
        Serialized dict, or None if doc was None
    """
    if doc is None:
        return None

    result: dict[str, Any] = {}
    if "_id" in doc:
        result["id"] = str(doc["_id"])

    for key, value in doc.items():
        if key == "_id" or key in HIDDEN_FIELDS:
            continue
        result[key] = _serialize_value(value)

    return result


def serialize_documents(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Serialize a list of documents."""
    return [serialize_document(doc) for doc in docs]


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for library-level errors (geocoder, mailer).

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class GeocoderError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="GEOCODER_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
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
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }

# =============================================================================
# app/exceptions.py - Custom Exceptions and Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Services raise typed exceptions; this module is the only place where a
# failure becomes a client-visible response. Every error response has the
# same envelope:
#
#   {"success": false, "error": "Bootcamp not found with id of 5d71..."}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BootcampApiException(Exception):
    """
    Base exception for the Bootcamp API.

    All custom exceptions inherit from this class and carry the HTTP status
    they should be reported with.
    """

    def __init__(
        self,
        message: str,
        code: str = "BOOTCAMP_API_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the error envelope."""
        return {
            "success": False,
            "error": self.message,
        }


# =============================================================================
# Not Found (404)
# =============================================================================

class NotFoundError(BootcampApiException):
    """Raised when a document doesn't exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} not found with id of {resource_id}",
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "id": resource_id}
        )


class BootcampNotFoundError(NotFoundError):
    def __init__(self, bootcamp_id: str):
        super().__init__("Bootcamp", bootcamp_id)


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str):
        super().__init__("Course", course_id)


class ReviewNotFoundError(NotFoundError):
    def __init__(self, review_id: str):
        super().__init__("Review", review_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class EmailNotFoundError(BootcampApiException):
    """Raised by forgot-password when no account uses the email."""

    def __init__(self, email: str):
        super().__init__(
            message="There is no user with that email",
            code="EMAIL_NOT_FOUND",
            status_code=404,
            details={"email": email}
        )


# =============================================================================
# Bad Request (400)
# =============================================================================

class ValidationFailedError(BootcampApiException):
    """Raised when one or more fields fail validation."""

    def __init__(self, messages: list[str]):
        super().__init__(
            message=", ".join(messages),
            code="VALIDATION_FAILED",
            status_code=400,
            details={"messages": messages}
        )
        self.messages = messages


class ConflictError(BootcampApiException):
    """Raised when a unique field or unique pair is already taken."""

    def __init__(self, message: str = "Duplicate field value entered"):
        super().__init__(
            message=message,
            code="DUPLICATE_VALUE",
            status_code=400,
        )


class AlreadyPublishedError(BootcampApiException):
    """Raised when a non-admin tries to publish a second bootcamp."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"The user with ID {user_id} has already published a bootcamp",
            code="ALREADY_PUBLISHED",
            status_code=400,
            details={"user_id": user_id}
        )


class AlreadyJoinedError(BootcampApiException):
    """Raised when a user joins a bootcamp twice."""

    def __init__(self, user_id: str, bootcamp_id: str):
        super().__init__(
            message=f"User {user_id} has already joined bootcamp {bootcamp_id}",
            code="ALREADY_JOINED",
            status_code=400,
            details={"user_id": user_id, "bootcamp_id": bootcamp_id}
        )


class NotJoinedError(BootcampApiException):
    """Raised when a user reviews a bootcamp they never joined."""

    def __init__(self, user_id: str, bootcamp_id: str):
        super().__init__(
            message=f"User {user_id} must join bootcamp {bootcamp_id} before reviewing it",
            code="NOT_JOINED",
            status_code=400,
            details={"user_id": user_id, "bootcamp_id": bootcamp_id}
        )


class InvalidResetTokenError(BootcampApiException):
    """Raised when a reset token is unknown or expired."""

    def __init__(self):
        super().__init__(
            message="Invalid token",
            code="INVALID_RESET_TOKEN",
            status_code=400,
        )


class FileUploadError(BootcampApiException):
    """Raised when an uploaded photo is missing, not an image, or too big."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="FILE_UPLOAD_ERROR",
            status_code=400,
        )


class PhotoTooLargeError(FileUploadError):
    def __init__(self, limit: int):
        super().__init__(f"Please upload an image less than {limit} bytes")


# =============================================================================
# Unauthorized (401) / Forbidden (403)
# =============================================================================

class UnauthorizedError(BootcampApiException):
    """Raised when a credential is missing, invalid or expired."""

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class ForbiddenError(BootcampApiException):
    """Raised when the principal may not perform the action."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
            details=details,
        )


class RoleForbiddenError(ForbiddenError):
    def __init__(self, role: str):
        super().__init__(
            message=f"User role {role} is not authorized to access this route",
            details={"role": role},
        )


class NotOwnerError(ForbiddenError):
    def __init__(self, user_id: str, action: str, resource: str, resource_id: str):
        super().__init__(
            message=f"User {user_id} is not authorized to {action} {resource} {resource_id}",
            details={"user_id": user_id, "resource": resource, "id": resource_id},
        )


# =============================================================================
# Dependency / Internal (500)
# =============================================================================

class DependencyFailureError(BootcampApiException):
    """Raised when an external provider (mail, geocoding, disk) fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="DEPENDENCY_FAILURE",
            status_code=500,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def format_validation_errors(errors: list[dict[str, Any]]) -> list[str]:
    """
    Turn pydantic error dicts into one message per field.

    The request section of the location (body/query/path) is dropped:
        ("body", "rating") + "Input should be less than or equal to 10"
        -> "rating: Input should be less than or equal to 10"
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


async def bootcamp_api_exception_handler(
    request: Request,
    exc: BootcampApiException
) -> JSONResponse:
    """Convert a BootcampApiException to the error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError | ValidationError
) -> JSONResponse:
    """
    Handle request validation errors and re-validation of merged documents.

    The message is every field-level message joined together.
    """
    messages = format_validation_errors(exc.errors())
    return _error_response(400, ", ".join(messages))


async def duplicate_key_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unique index violation."""
    logger.info(f"Duplicate key on {request.method} {request.url.path}")
    return _error_response(400, "Duplicate field value entered")


async def invalid_id_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """A malformed ObjectId cannot name any document."""
    return _error_response(404, "Resource not found")


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Framework-raised HTTP errors (unknown route, wrong method)."""
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unclassified."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return _error_response(500, "Server Error")

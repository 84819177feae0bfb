# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: Role enum and the request base model
# - bootcamp.py: Bootcamp schemas and filterable fields
# - course.py: Course schemas and filterable fields
# - review.py: Review schemas and filterable fields
# - user.py: User and auth request schemas, AuthUser principal
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------
from .common import EntityModel, Role, updates_from

# -----------------------------------------------------------------------------
# Bootcamp Models
# -----------------------------------------------------------------------------
from .bootcamp import (
    BOOTCAMP_FIELDS,
    DEFAULT_PHOTO,
    BootcampCreate,
    BootcampFields,
    BootcampUpdate,
    Career,
    slugify,
)

# -----------------------------------------------------------------------------
# Course Models
# -----------------------------------------------------------------------------
from .course import COURSE_FIELDS, CourseCreate, CourseUpdate, SkillLevel

# -----------------------------------------------------------------------------
# Review Models
# -----------------------------------------------------------------------------
from .review import REVIEW_FIELDS, ReviewCreate, ReviewUpdate

# -----------------------------------------------------------------------------
# User Models
# -----------------------------------------------------------------------------
from .user import (
    USER_FIELDS,
    AuthUser,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserCreate,
    UserDetails,
    UserRecord,
    UserUpdate,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Shared
    "EntityModel",
    "Role",
    "updates_from",
    # Bootcamp
    "BOOTCAMP_FIELDS",
    "DEFAULT_PHOTO",
    "BootcampCreate",
    "BootcampFields",
    "BootcampUpdate",
    "Career",
    "slugify",
    # Course
    "COURSE_FIELDS",
    "CourseCreate",
    "CourseUpdate",
    "SkillLevel",
    # Review
    "REVIEW_FIELDS",
    "ReviewCreate",
    "ReviewUpdate",
    # User
    "USER_FIELDS",
    "AuthUser",
    "ForgotPasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "UpdateDetailsRequest",
    "UpdatePasswordRequest",
    "UserCreate",
    "UserDetails",
    "UserRecord",
    "UserUpdate",
]

# =============================================================================
# core/models/bootcamp.py - Bootcamp Schemas
# =============================================================================
# These models define the API contract for bootcamp operations:
# - BootcampFields: every client-editable field (used to re-validate updates)
# - BootcampCreate: input for creating a bootcamp (address required)
# - BootcampUpdate: partial input for updates
# - BOOTCAMP_FIELDS: filterable fields and their types (query builder)
#
# Derived fields (slug, location, average_cost, average_rating, photo) and
# ownership fields (user, joined_users) are written by the service only.
# =============================================================================

import re
from datetime import datetime
from enum import Enum

from bson import ObjectId
from pydantic import EmailStr, Field

from .common import EntityModel

DEFAULT_PHOTO = "no-photo.jpg"


class Career(str, Enum):
    """Career tracks a bootcamp can prepare students for."""
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    UI_UX = "UI/UX"
    DATA_SCIENCE = "Data Science"
    BUSINESS = "Business"
    OTHER = "Other"


class BootcampFields(EntityModel):
    """
    Client-editable bootcamp fields.

    `address` is optional here because it is consumed by geocoding and not
    stored; updates are re-validated against this model after merging.
    """
    name: str = Field(..., min_length=1, max_length=50, description="Unique bootcamp name")
    description: str = Field(..., min_length=1, max_length=500)
    website: str | None = Field(
        default=None,
        pattern=r"^https?://\S+$",
        description="Must be a URL with HTTP or HTTPS"
    )
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1)
    careers: list[Career] = Field(..., min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampCreate(BootcampFields):
    """
    Schema for creating a bootcamp.

    Example:
        {
            "name": "Devworks Bootcamp",
            "description": "Devworks is a full stack JavaScript Bootcamp...",
            "website": "https://devworks.com",
            "address": "233 Bay State Rd Boston MA 02215",
            "careers": ["Web Development", "UI/UX", "Business"],
            "housing": true
        }
    """
    address: str = Field(..., min_length=1)


class BootcampUpdate(EntityModel):
    """Partial bootcamp update; only sent fields are applied."""
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    website: str | None = Field(default=None, pattern=r"^https?://\S+$")
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1)
    careers: list[Career] | None = Field(default=None, min_length=1)
    housing: bool | None = None
    job_assistance: bool | None = None
    job_guarantee: bool | None = None
    accept_gi: bool | None = None


BOOTCAMP_FIELDS: dict[str, type] = {
    "_id": ObjectId,
    "name": str,
    "slug": str,
    "description": str,
    "website": str,
    "phone": str,
    "email": str,
    "careers": str,
    "location.city": str,
    "location.state": str,
    "location.zipcode": str,
    "location.country": str,
    "average_cost": float,
    "average_rating": float,
    "photo": str,
    "housing": bool,
    "job_assistance": bool,
    "job_guarantee": bool,
    "accept_gi": bool,
    "user": ObjectId,
    "joined_users": ObjectId,
    "created_at": datetime,
}


def slugify(name: str) -> str:
    """'Devworks Bootcamp!' -> 'devworks-bootcamp'"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")

# =============================================================================
# core/models/common.py - Shared Schema Pieces
# =============================================================================
# Types shared by more than one entity:
# - Role: user roles used by authorization
# - EntityModel: base class for request bodies
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """
    User roles.

    - user: can join bootcamps and review the ones they joined
    - publisher: can publish one bootcamp and manage its courses
    - admin: unrestricted
    """
    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"


class EntityModel(BaseModel):
    """
    Base for request schemas.

    Strings are trimmed and unknown keys are dropped, so clients cannot
    write derived or ownership fields (average_cost, user, ...).
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


def updates_from(model: BaseModel) -> dict[str, Any]:
    """Fields the client actually sent in an update body, JSON-ready."""
    return model.model_dump(mode="json", exclude_unset=True)

# =============================================================================
# core/services/permissions.py - Ownership Checks
# =============================================================================
# Only the user who created a bootcamp, course or review (or an admin) may
# change or delete it. The database does not enforce this; services do.
# =============================================================================

from typing import Any

from app.exceptions import NotOwnerError
from core.models import AuthUser


def is_owner(doc: dict[str, Any], user: AuthUser, field: str = "user") -> bool:
    """True when the document's owner field names this user."""
    return str(doc.get(field)) == user.id


def ensure_owner(
    doc: dict[str, Any],
    user: AuthUser,
    action: str,
    resource: str,
    field: str = "user",
) -> None:
    """
    Raise unless the user owns the document or is an admin.

    Args:
        doc: The stored document
        user: Acting principal
        action: Verb for the message ("update", "delete", ...)
        resource: Noun for the message ("bootcamp", "course", ...)
        field: Document field holding the owner id

    Raises:
        NotOwnerError: 403
    """
    if user.is_admin or is_owner(doc, user, field):
        return
    raise NotOwnerError(user.id, action, resource, str(doc.get("_id")))

# =============================================================================
# app/routers/users.py - User Administration Endpoints
# =============================================================================
# Admin-only user management. Every route requires an admin token.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import authorize
from app.dependencies import advanced_results
from core.models import USER_FIELDS, UserCreate, UserUpdate
from core.services.user_service import UserService
from lib.database import USERS
from lib.utils import serialize_document

router = APIRouter(dependencies=[Depends(authorize("admin"))])

UserId = Annotated[str, Path(description="User id")]


@router.get("")
async def list_users(results: dict = Depends(advanced_results(USERS, USER_FIELDS))):
    """List users with filtering, sorting and pagination."""
    return results


@router.get("/{user_id}")
async def get_user(user_id: UserId):
    """Get a single user."""
    user = UserService.get_user(user_id)
    return {"success": True, "data": serialize_document(user)}


@router.post("", status_code=201)
async def create_user(body: UserCreate):
    """Create a user with any role."""
    user = UserService.create_user(body)
    return {"success": True, "data": serialize_document(user)}


@router.put("/{user_id}")
async def update_user(user_id: UserId, body: UserUpdate):
    """Update any user field; a new password is re-hashed."""
    user = UserService.update_user(user_id, body)
    return {"success": True, "data": serialize_document(user)}


@router.delete("/{user_id}")
async def delete_user(user_id: UserId):
    """Delete a user."""
    UserService.delete_user(user_id)
    return {"success": True, "data": {}}

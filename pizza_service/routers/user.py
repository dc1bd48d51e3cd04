"""
User Routes

Profile read and update for the authenticated user. Admins may update
any user.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import ForbiddenError, NotFoundError
from pizza_service.database import get_db
from pizza_service.dependencies import AuthUser, get_current_user
from pizza_service.models import Role
from pizza_service.repositories import users
from pizza_service.schemas import (
    AuthResponse,
    MessageResponse,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["User"])

docs = [
    {
        "method": "GET",
        "path": "/api/user/me",
        "requires_auth": True,
        "description": "Get authenticated user",
    },
    {
        "method": "PUT",
        "path": "/api/user/:userId",
        "requires_auth": True,
        "description": "Update user",
    },
    {
        "method": "DELETE",
        "path": "/api/user/:userId",
        "requires_auth": True,
        "description": "Delete user (not implemented)",
    },
    {
        "method": "GET",
        "path": "/api/user",
        "requires_auth": True,
        "description": "List users (not implemented)",
    },
]


@router.get(
    "/me",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Get authenticated user",
)
async def get_me(current_user: AuthUser = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user.model_dump())


@router.put(
    "/{user_id}",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    summary="Update user",
)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """
    Update name, email or password.

    Only the user themself or an admin may do this. The response carries
    a new token reflecting the updated claims.
    """
    if str(current_user.id) != user_id and not current_user.is_role(Role.ADMIN):
        raise ForbiddenError("unauthorized")

    try:
        target_id = int(user_id)
    except ValueError:
        raise NotFoundError("unknown user")

    user = await users.update_user(
        db,
        target_id,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    token = await users.issue_token(db, user)
    return AuthResponse(user=user, token=token)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete user",
)
async def delete_user(
    user_id: str,
    current_user: AuthUser = Depends(get_current_user),
) -> MessageResponse:
    return MessageResponse(message="not implemented")


@router.get(
    "",
    response_model=MessageResponse,
    summary="List users",
)
async def list_users(current_user: AuthUser = Depends(get_current_user)) -> MessageResponse:
    return MessageResponse(message="not implemented")

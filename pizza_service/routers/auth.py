"""
Authentication Routes

Register, login and logout. Every successful register/login issues a
new token and allow-lists it; logout revokes the presented token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import StatusCodeError
from pizza_service.database import get_db
from pizza_service.dependencies import AuthUser, get_current_user
from pizza_service.models import Role
from pizza_service.repositories import users
from pizza_service.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

docs = [
    {
        "method": "POST",
        "path": "/api/auth",
        "requires_auth": False,
        "description": "Register a new diner",
    },
    {
        "method": "PUT",
        "path": "/api/auth",
        "requires_auth": False,
        "description": "Login existing user",
    },
    {
        "method": "DELETE",
        "path": "/api/auth",
        "requires_auth": True,
        "description": "Logout a user",
    },
]


@router.post(
    "",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    summary="Register",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Create a diner account and return it with a fresh token."""
    if not payload.name or not payload.email or not payload.password:
        raise StatusCodeError("name, email, and password are required", 400)

    user = await users.add_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        roles=[{"role": Role.DINER.value}],
    )
    token = await users.issue_token(db, user)
    return AuthResponse(user=user, token=token)


@router.put(
    "",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    summary="Login",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    user = await users.get_user(db, payload.email, payload.password)
    token = await users.issue_token(db, user)
    logger.info(f"User #{user['id']} logged in")
    return AuthResponse(user=user, token=token)


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Logout",
)
async def logout(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await users.logout_user(db, current_user.token)
    logger.info(f"User #{current_user.id} logged out")
    return MessageResponse(message="logout successful")

"""
Request Authentication Dependencies

A caller is authenticated when the bearer token is allow-listed in the
auth table AND its signature verifies. Everyone else is anonymous.
"""

import logging
from typing import List, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import UnauthorizedError
from pizza_service.core.security import decode_token
from pizza_service.database import get_db
from pizza_service.models import Role
from pizza_service.repositories import users
from pizza_service.schemas import RoleClaim

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AuthUser(BaseModel):
    """The user claims carried by a verified token."""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    email: str
    roles: List[RoleClaim] = Field(default_factory=list)
    token: str = Field(default="", exclude=True)

    def is_role(self, role: Role) -> bool:
        return any(r.role == role.value for r in self.roles)

    def administers(self, franchise: dict) -> bool:
        """True if the user is listed as an admin of the franchise."""
        return any(admin["id"] == self.id for admin in franchise.get("admins") or [])


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[AuthUser]:
    """Resolve the caller, or None for anonymous requests."""
    if credentials is None:
        return None

    token = credentials.credentials
    if not await users.is_logged_in(db, token):
        return None

    try:
        claims = decode_token(token)
        return AuthUser.model_validate({**claims, "token": token})
    except (jwt.InvalidTokenError, ValidationError) as e:
        logger.warning(f"Rejected allow-listed token: {e}")
        return None


async def get_current_user(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
) -> AuthUser:
    """Require an authenticated caller (401 otherwise)."""
    if user is None:
        raise UnauthorizedError()
    return user

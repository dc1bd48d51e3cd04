"""
User Repository

Accounts, role grants and the auth-token allow-list.

Users are returned as claim dictionaries ({id, name, email, roles}),
the same shape that is signed into tokens, so the password hash never
leaves this module.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import StatusCodeError, NotFoundError
from pizza_service.core.security import (
    create_token,
    hash_password,
    verify_password,
    token_signature,
)
from pizza_service.models import User, UserRole, AuthToken, Role

logger = logging.getLogger(__name__)


def _role_claim(role: UserRole) -> dict[str, Any]:
    claim: dict[str, Any] = {"role": role.role.value}
    if role.object_id:
        claim["objectId"] = role.object_id
    return claim


async def _roles_for(db: AsyncSession, user_id: int) -> list[dict[str, Any]]:
    result = await db.execute(
        select(UserRole).where(UserRole.user_id == user_id).order_by(UserRole.id)
    )
    return [_role_claim(r) for r in result.scalars().all()]


async def _claims_for(db: AsyncSession, user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "roles": await _roles_for(db, user.id),
    }


# =============================================================================
# ACCOUNTS
# =============================================================================

async def add_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    roles: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """
    Create a user with the given role grants.

    Args:
        roles: Grants like {"role": "admin"} or
            {"role": "franchisee", "objectId": <franchise id>}.
            Defaults to a single diner grant.

    Raises:
        StatusCodeError: 409 if the email is already registered
    """
    roles = roles or [{"role": Role.DINER.value}]

    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise StatusCodeError("email already registered", 409)

    user = User(name=name, email=email, password=hash_password(password))
    db.add(user)
    try:
        await db.flush()
        for grant in roles:
            role = Role(grant["role"])
            object_id = int(grant.get("objectId") or 0)
            db.add(UserRole(user_id=user.id, role=role, object_id=object_id))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise StatusCodeError("email already registered", 409)
    except Exception:
        await db.rollback()
        raise

    logger.info(f"User #{user.id} registered ({email})")
    return await _claims_for(db, user)


async def get_user(db: AsyncSession, email: Optional[str], password: Optional[str]) -> dict[str, Any]:
    """
    Look up a user by credentials.

    Raises:
        NotFoundError: If the email is unknown or the password does not match
    """
    user = None
    if email:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

    if user is None or not password or not verify_password(password, user.password):
        raise NotFoundError("unknown user")

    return await _claims_for(db, user)


async def get_user_by_id(db: AsyncSession, user_id: int) -> dict[str, Any]:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("unknown user")
    return await _claims_for(db, user)


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def update_user(
    db: AsyncSession,
    user_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> dict[str, Any]:
    """
    Update the supplied profile fields of a user.

    Raises:
        NotFoundError: If the user does not exist
        StatusCodeError: 409 if the new email belongs to another user
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("unknown user")

    if email and email != user.email:
        other = await find_user_by_email(db, email)
        if other is not None:
            raise StatusCodeError("email already registered", 409)
        user.email = email
    if name:
        user.name = name
    if password:
        user.password = hash_password(password)

    await db.commit()
    logger.info(f"User #{user.id} updated")
    return await _claims_for(db, user)


# =============================================================================
# AUTH TOKEN ALLOW-LIST
# =============================================================================

async def issue_token(db: AsyncSession, claims: dict[str, Any]) -> str:
    """Sign a token for the user claims and allow-list it."""
    token = create_token(claims)
    await login_user(db, claims["id"], token)
    return token


async def login_user(db: AsyncSession, user_id: int, token: str) -> None:
    """Allow-list a freshly issued token for the user."""
    signature = token_signature(token)
    if await db.get(AuthToken, signature) is None:
        db.add(AuthToken(token=signature, user_id=user_id))
        await db.commit()


async def is_logged_in(db: AsyncSession, token: str) -> bool:
    signature = token_signature(token)
    if not signature:
        return False
    return await db.get(AuthToken, signature) is not None


async def logout_user(db: AsyncSession, token: str) -> None:
    """Revoke a token by removing its signature from the allow-list."""
    await db.execute(delete(AuthToken).where(AuthToken.token == token_signature(token)))
    await db.commit()

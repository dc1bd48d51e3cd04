"""
Franchise Routes

Franchise listing and administration, plus store management nested
under each franchise.

Access rules:
    - Anyone may list franchises; admins see administrators and revenue
    - Only admins create or delete franchises
    - Admins and the franchise's own administrators manage its stores
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import ForbiddenError
from pizza_service.database import get_db
from pizza_service.dependencies import (
    AuthUser,
    get_current_user,
    get_current_user_optional,
)
from pizza_service.models import Role
from pizza_service.repositories import franchises
from pizza_service.schemas import (
    FranchiseCreate,
    FranchiseListResponse,
    FranchiseResponse,
    MessageResponse,
    StoreCreate,
    StoreCreateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/franchise", tags=["Franchise"])

docs = [
    {
        "method": "GET",
        "path": "/api/franchise?page=0&limit=10&name=*",
        "requires_auth": False,
        "description": "List all the franchises",
    },
    {
        "method": "GET",
        "path": "/api/franchise/:userId",
        "requires_auth": True,
        "description": "List a user's franchises",
    },
    {
        "method": "POST",
        "path": "/api/franchise",
        "requires_auth": True,
        "description": "Create a new franchise (admin)",
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId",
        "requires_auth": True,
        "description": "Delete a franchise (admin)",
    },
    {
        "method": "POST",
        "path": "/api/franchise/:franchiseId/store",
        "requires_auth": True,
        "description": "Create a new franchise store",
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId/store/:storeId",
        "requires_auth": True,
        "description": "Delete a store",
    },
]


async def _require_store_manager(
    db: AsyncSession,
    current_user: AuthUser,
    franchise_id: int,
    message: str,
) -> None:
    franchise = await franchises.find_franchise(db, franchise_id)
    if franchise is None or not (
        current_user.is_role(Role.ADMIN) or current_user.administers(franchise)
    ):
        raise ForbiddenError(message)


@router.get(
    "",
    response_model=FranchiseListResponse,
    response_model_exclude_none=True,
    summary="List franchises",
)
async def list_franchises(
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    name: str = Query("*"),
    current_user: Optional[AuthUser] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> FranchiseListResponse:
    is_admin = current_user is not None and current_user.is_role(Role.ADMIN)
    listed, more = await franchises.get_franchises(db, page, limit, name, full=is_admin)
    return FranchiseListResponse(
        franchises=[FranchiseResponse.model_validate(f) for f in listed],
        more=more,
    )


@router.get(
    "/{user_id}",
    response_model=List[FranchiseResponse],
    response_model_exclude_none=True,
    summary="List a user's franchises",
)
async def list_user_franchises(
    user_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[FranchiseResponse]:
    """Only the user themself or an admin sees anything; others get []."""
    if str(current_user.id) != user_id and not current_user.is_role(Role.ADMIN):
        return []
    try:
        target_id = int(user_id)
    except ValueError:
        return []
    return [
        FranchiseResponse.model_validate(f)
        for f in await franchises.get_user_franchises(db, target_id)
    ]


@router.post(
    "",
    response_model=FranchiseResponse,
    response_model_exclude_none=True,
    summary="Create franchise",
)
async def create_franchise(
    payload: FranchiseCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FranchiseResponse:
    if not current_user.is_role(Role.ADMIN):
        raise ForbiddenError("unable to create a franchise")

    franchise = await franchises.create_franchise(
        db,
        payload.name,
        [admin.email for admin in payload.admins],
    )
    return FranchiseResponse.model_validate(franchise)


@router.delete(
    "/{franchise_id}",
    response_model=MessageResponse,
    summary="Delete franchise",
)
async def delete_franchise(
    franchise_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    if not current_user.is_role(Role.ADMIN):
        raise ForbiddenError("unable to delete a franchise")

    await franchises.delete_franchise(db, franchise_id)
    return MessageResponse(message="franchise deleted")


@router.post(
    "/{franchise_id}/store",
    response_model=StoreCreateResponse,
    summary="Create store",
)
async def create_store(
    franchise_id: int,
    payload: StoreCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StoreCreateResponse:
    await _require_store_manager(db, current_user, franchise_id, "unable to create a store")

    store = await franchises.create_store(db, franchise_id, payload.name)
    return StoreCreateResponse.model_validate(store)


@router.delete(
    "/{franchise_id}/store/{store_id}",
    response_model=MessageResponse,
    summary="Delete store",
)
async def delete_store(
    franchise_id: int,
    store_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await _require_store_manager(db, current_user, franchise_id, "unable to delete a store")

    await franchises.delete_store(db, franchise_id, store_id)
    return MessageResponse(message="store deleted")

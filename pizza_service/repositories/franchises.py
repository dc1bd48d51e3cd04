"""
Franchise Repository

Franchises, their franchisee administrators and their stores.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import StatusCodeError, NotFoundError
from pizza_service.models import (
    User,
    UserRole,
    Franchise,
    Store,
    DinerOrder,
    OrderItem,
    Role,
)
from pizza_service.repositories.users import find_user_by_email

logger = logging.getLogger(__name__)


async def _franchise_admins(db: AsyncSession, franchise_id: int) -> list[dict[str, Any]]:
    result = await db.execute(
        select(User.id, User.name, User.email)
        .join(UserRole, UserRole.user_id == User.id)
        .where(UserRole.object_id == franchise_id, UserRole.role == Role.FRANCHISEE)
        .order_by(User.id)
    )
    return [{"id": r.id, "name": r.name, "email": r.email} for r in result.all()]


async def _stores_with_revenue(db: AsyncSession, franchise_id: int) -> list[dict[str, Any]]:
    result = await db.execute(
        select(
            Store.id,
            Store.name,
            func.coalesce(func.sum(OrderItem.price), 0).label("total_revenue"),
        )
        .select_from(Store)
        .outerjoin(DinerOrder, DinerOrder.store_id == Store.id)
        .outerjoin(OrderItem, OrderItem.order_id == DinerOrder.id)
        .where(Store.franchise_id == franchise_id)
        .group_by(Store.id, Store.name)
        .order_by(Store.id)
    )
    return [
        {"id": r.id, "name": r.name, "total_revenue": float(r.total_revenue)}
        for r in result.all()
    ]


async def _store_summaries(db: AsyncSession, franchise_id: int) -> list[dict[str, Any]]:
    result = await db.execute(
        select(Store.id, Store.name).where(Store.franchise_id == franchise_id).order_by(Store.id)
    )
    return [{"id": r.id, "name": r.name} for r in result.all()]


async def get_franchise(db: AsyncSession, franchise: Franchise) -> dict[str, Any]:
    """Full franchise view: administrators and per-store revenue."""
    return {
        "id": franchise.id,
        "name": franchise.name,
        "admins": await _franchise_admins(db, franchise.id),
        "stores": await _stores_with_revenue(db, franchise.id),
    }


async def find_franchise(db: AsyncSession, franchise_id: int) -> Optional[dict[str, Any]]:
    franchise = await db.get(Franchise, franchise_id)
    if franchise is None:
        return None
    return await get_franchise(db, franchise)


async def get_franchises(
    db: AsyncSession,
    page: int = 0,
    limit: int = 10,
    name_filter: str = "*",
    full: bool = False,
) -> tuple[list[dict[str, Any]], bool]:
    """
    List franchises whose name matches a ``*`` wildcard pattern.

    Args:
        page: Zero-based page number
        limit: Page size
        name_filter: Name pattern, ``*`` matches any run of characters
        full: Include administrators and store revenue

    Returns:
        (franchises, more) where ``more`` tells whether a next page exists
    """
    pattern = (
        (name_filter or "*")
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("*", "%")
    )
    result = await db.execute(
        select(Franchise)
        .where(Franchise.name.like(pattern, escape="\\"))
        .order_by(Franchise.id)
        .offset(page * limit)
        .limit(limit + 1)
    )
    franchises = list(result.scalars().all())
    more = len(franchises) > limit
    franchises = franchises[:limit]

    listed = []
    for franchise in franchises:
        if full:
            listed.append(await get_franchise(db, franchise))
        else:
            listed.append({
                "id": franchise.id,
                "name": franchise.name,
                "stores": await _store_summaries(db, franchise.id),
            })
    return listed, more


async def get_user_franchises(db: AsyncSession, user_id: int) -> list[dict[str, Any]]:
    """Franchises the user holds a franchisee grant for."""
    result = await db.execute(
        select(Franchise)
        .join(UserRole, UserRole.object_id == Franchise.id)
        .where(UserRole.user_id == user_id, UserRole.role == Role.FRANCHISEE)
        .order_by(Franchise.id)
    )
    return [await get_franchise(db, f) for f in result.scalars().unique().all()]


async def create_franchise(
    db: AsyncSession,
    name: str,
    admin_emails: list[str],
) -> dict[str, Any]:
    """
    Create a franchise and grant each listed admin the franchisee role.

    Raises:
        NotFoundError: If an admin email does not belong to a user
        StatusCodeError: 409 if the franchise name is taken
    """
    admins = []
    for email in admin_emails:
        user = await find_user_by_email(db, email)
        if user is None:
            raise NotFoundError(f"unknown user for franchise admin {email} provided")
        admins.append(user)

    franchise = Franchise(name=name)
    db.add(franchise)
    try:
        await db.flush()
        for admin in admins:
            db.add(UserRole(user_id=admin.id, role=Role.FRANCHISEE, object_id=franchise.id))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise StatusCodeError(f"franchise {name} already exists", 409)

    logger.info(f"Franchise #{franchise.id} created ({name}) with {len(admins)} admin(s)")
    return {
        "id": franchise.id,
        "name": franchise.name,
        "admins": [{"id": a.id, "name": a.name, "email": a.email} for a in admins],
    }


async def delete_franchise(db: AsyncSession, franchise_id: int) -> None:
    """Delete a franchise together with its stores and franchisee grants."""
    franchise = await db.get(Franchise, franchise_id)
    if franchise is None:
        raise NotFoundError("unknown franchise")

    try:
        await db.execute(delete(Store).where(Store.franchise_id == franchise_id))
        await db.execute(
            delete(UserRole).where(
                UserRole.object_id == franchise_id,
                UserRole.role == Role.FRANCHISEE,
            )
        )
        await db.delete(franchise)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Franchise #{franchise_id} deleted")


async def create_store(db: AsyncSession, franchise_id: int, name: str) -> dict[str, Any]:
    store = Store(franchise_id=franchise_id, name=name)
    db.add(store)
    await db.commit()
    logger.info(f"Store #{store.id} created in franchise #{franchise_id}")
    return {"id": store.id, "franchise_id": store.franchise_id, "name": store.name}


async def delete_store(db: AsyncSession, franchise_id: int, store_id: int) -> None:
    result = await db.execute(
        delete(Store).where(Store.franchise_id == franchise_id, Store.id == store_id)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("unknown store")
    await db.commit()
    logger.info(f"Store #{store_id} deleted from franchise #{franchise_id}")


async def store_exists(db: AsyncSession, franchise_id: int, store_id: int) -> bool:
    result = await db.execute(
        select(Store.id).where(Store.franchise_id == franchise_id, Store.id == store_id)
    )
    return result.scalar_one_or_none() is not None

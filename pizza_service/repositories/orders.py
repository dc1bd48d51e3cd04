"""
Order Repository

Menu items and diner orders.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import NotFoundError
from pizza_service.models import MenuItem, DinerOrder, OrderItem
from pizza_service.repositories.franchises import store_exists
from pizza_service.schemas import MenuItemCreate, OrderCreate

logger = logging.getLogger(__name__)


# =============================================================================
# MENU
# =============================================================================

async def get_menu(db: AsyncSession) -> list[MenuItem]:
    result = await db.execute(select(MenuItem).order_by(MenuItem.id))
    return list(result.scalars().all())


async def add_menu_item(db: AsyncSession, item: MenuItemCreate) -> MenuItem:
    menu_item = MenuItem(
        title=item.title,
        description=item.description,
        image=item.image,
        price=item.price,
    )
    db.add(menu_item)
    await db.commit()
    logger.info(f"Menu item #{menu_item.id} added ({menu_item.title})")
    return menu_item


# =============================================================================
# DINER ORDERS
# =============================================================================

async def _items_for(db: AsyncSession, order_id: int) -> list[dict[str, Any]]:
    result = await db.execute(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    )
    return [
        {
            "id": item.id,
            "menu_id": item.menu_id,
            "description": item.description,
            "price": item.price,
        }
        for item in result.scalars().all()
    ]


def _order_dict(order: DinerOrder, items: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "id": order.id,
        "franchise_id": order.franchise_id,
        "store_id": order.store_id,
        "date": order.date,
        "items": items,
    }


async def get_orders(
    db: AsyncSession,
    diner_id: int,
    page: int = 1,
    per_page: int = 10,
) -> dict[str, Any]:
    """
    One page of a diner's order history, oldest first.

    Args:
        page: One-based page number
    """
    offset = (max(page, 1) - 1) * per_page
    result = await db.execute(
        select(DinerOrder)
        .where(DinerOrder.diner_id == diner_id)
        .order_by(DinerOrder.id)
        .offset(offset)
        .limit(per_page)
    )
    orders = [
        _order_dict(order, await _items_for(db, order.id))
        for order in result.scalars().all()
    ]
    return {"diner_id": diner_id, "orders": orders, "page": page}


async def add_diner_order(db: AsyncSession, diner_id: int, order: OrderCreate) -> dict[str, Any]:
    """
    Persist an order and its items.

    Raises:
        NotFoundError: If the store is not part of the franchise or a
            menu item does not exist
    """
    if not await store_exists(db, order.franchise_id, order.store_id):
        raise NotFoundError("unknown store")

    menu_ids = {item.menu_id for item in order.items}
    result = await db.execute(select(MenuItem.id).where(MenuItem.id.in_(menu_ids)))
    missing = menu_ids - set(result.scalars().all())
    if missing:
        raise NotFoundError(f"unknown menu item {min(missing)}")

    diner_order = DinerOrder(
        diner_id=diner_id,
        franchise_id=order.franchise_id,
        store_id=order.store_id,
    )
    db.add(diner_order)
    try:
        await db.flush()
        order_items = [
            OrderItem(
                order_id=diner_order.id,
                menu_id=item.menu_id,
                description=item.description,
                price=item.price,
            )
            for item in order.items
        ]
        db.add_all(order_items)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"Order #{diner_order.id} saved for diner #{diner_id} "
        f"({len(order_items)} item(s), store #{order.store_id})"
    )
    return _order_dict(
        diner_order,
        [
            {
                "id": item.id,
                "menu_id": item.menu_id,
                "description": item.description,
                "price": item.price,
            }
            for item in order_items
        ],
    )

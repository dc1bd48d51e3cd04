"""
Order & Menu Routes

Menu browsing and administration, diner order history, and order
placement. Placing an order persists it first, then hands it to the
pizza factory for fulfillment.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.config import get_settings
from pizza_service.core.exceptions import ForbiddenError
from pizza_service.database import get_db
from pizza_service.dependencies import AuthUser, get_current_user
from pizza_service.models import Role
from pizza_service.repositories import orders
from pizza_service.schemas import (
    MenuItemCreate,
    MenuItemResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderHistoryResponse,
    OrderResponse,
)
from pizza_service.services.factory import BaseFactoryService, get_factory_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/order", tags=["Order"])

docs = [
    {
        "method": "GET",
        "path": "/api/order/menu",
        "requires_auth": False,
        "description": "Get the pizza menu",
    },
    {
        "method": "PUT",
        "path": "/api/order/menu",
        "requires_auth": True,
        "description": "Add an item to the menu (admin)",
    },
    {
        "method": "GET",
        "path": "/api/order?page=1",
        "requires_auth": True,
        "description": "Get the orders for the authenticated user",
    },
    {
        "method": "POST",
        "path": "/api/order",
        "requires_auth": True,
        "description": "Create an order for the authenticated user",
    },
]


@router.get(
    "/menu",
    response_model=List[MenuItemResponse],
    summary="Get menu",
)
async def get_menu(db: AsyncSession = Depends(get_db)) -> List[MenuItemResponse]:
    return [MenuItemResponse.model_validate(item) for item in await orders.get_menu(db)]


@router.put(
    "/menu",
    response_model=List[MenuItemResponse],
    summary="Add menu item",
)
async def add_menu_item(
    item: MenuItemCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> List[MenuItemResponse]:
    """Add an item and return the whole menu. Admin only."""
    if not current_user.is_role(Role.ADMIN):
        raise ForbiddenError("unable to add menu item")

    await orders.add_menu_item(db, item)
    return [MenuItemResponse.model_validate(m) for m in await orders.get_menu(db)]


@router.get(
    "",
    response_model=OrderHistoryResponse,
    summary="Get orders",
)
async def get_orders(
    page: int = Query(1, ge=1),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> OrderHistoryResponse:
    settings = get_settings()
    history = await orders.get_orders(db, current_user.id, page, settings.list_per_page)
    return OrderHistoryResponse.model_validate(history)


@router.post(
    "",
    response_model=OrderCreateResponse,
    summary="Create order",
    responses={500: {"description": "Factory failed to fulfill the order"}},
)
async def create_order(
    payload: OrderCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    factory: BaseFactoryService = Depends(get_factory_service),
) -> Union[OrderCreateResponse, JSONResponse]:
    """
    Place an order.

    The order is stored before the factory is called, so a factory
    failure still leaves it in the diner's history.
    """
    order = OrderResponse.model_validate(
        await orders.add_diner_order(db, current_user.id, payload)
    )

    diner = {"id": current_user.id, "name": current_user.name, "email": current_user.email}
    result = await factory.submit_order(diner, order.model_dump(mode="json", by_alias=True))

    if not result.success:
        logger.error(
            f"Factory failed order #{order.id}: {result.error_message} "
            f"(report: {result.report_url}, {result.response_time_ms:.0f}ms)"
        )
        return JSONResponse(
            status_code=500,
            content={
                "message": "Failed to fulfill order at factory",
                "followLinkToEndChaos": result.report_url,
            },
        )

    logger.info(f"Order #{order.id} fulfilled by factory in {result.response_time_ms:.0f}ms")

    return OrderCreateResponse(
        order=order,
        follow_link_to_end_chaos=result.report_url,
        jwt=result.jwt,
    )

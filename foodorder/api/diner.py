"""
Diner Routes (Diner token required)

    - GET  /diner
    - POST /diner/orders
    - GET  /diner/orders
    - GET  /diner/orders/{order_id}
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from foodorder.api.dependencies import ResourceId, get_order_service, get_principal
from foodorder.schemas import AccountResponse, ErrorResponse, OrderCreate, OrderResponse
from foodorder.services.access import require
from foodorder.services.identity import Principal
from foodorder.services.orders import OrderService
from foodorder.services.pricing import OrderLineRequest


router = APIRouter(prefix="/diner", tags=["Diner"])


@router.get("", response_model=AccountResponse)
async def diner_account(principal: Principal = Depends(get_principal)) -> AccountResponse:
    require(principal.is_diner, 'Invalid user type. Must be "diner"')
    return AccountResponse(user_id=principal.user_id, user_type=principal.role)


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Place Order",
)
async def place_order(
    order_data: OrderCreate,
    principal: Principal = Depends(get_principal),
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """
    Place an order against one venue's menu.

    Prices are looked up server-side; the response carries the
    authoritative total and per-line price snapshots.
    """
    lines = [
        OrderLineRequest(menu_item_id=item.menu_item_id, quantity=item.quantity)
        for item in order_data.items
    ]
    return await orders.place_order(principal, order_data.venue_id, lines)


@router.get("/orders", response_model=list[OrderResponse])
async def list_my_orders(
    status: Optional[str] = Query(None),
    principal: Principal = Depends(get_principal),
    orders: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    """The caller's own orders, newest first."""
    return await orders.list_for_diner(principal, status)


@router.get(
    "/orders/{order_id}",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_my_order(
    order_id: ResourceId,
    principal: Principal = Depends(get_principal),
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return await orders.get_for_diner(principal, order_id)

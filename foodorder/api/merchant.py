"""
Merchant Routes (Merchant token required)

Account:
    - GET /merchant

Venues (caller must own the venue for anything under /{venue_id}):
    - POST/GET          /merchant/venues
    - GET/PUT/DELETE    /merchant/venues/{venue_id}
    - POST/GET          /merchant/venues/{venue_id}/menuitems
    - PUT/DELETE        /merchant/venues/{venue_id}/menuitems/{item_id}
    - GET               /merchant/venues/{venue_id}/orders

Orders:
    - PUT /merchant/orders/{order_id}/status
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from foodorder.api.dependencies import (
    ResourceId,
    get_order_service,
    get_principal,
    get_venue_service,
)
from foodorder.schemas import (
    AccountResponse,
    ErrorResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MessageResponse,
    OrderResponse,
    OrderStatusUpdate,
    VenueCreate,
    VenueEnvelope,
    VenueListResponse,
    VenueResponse,
    VenueUpdate,
)
from foodorder.services.access import require
from foodorder.services.identity import Principal
from foodorder.services.orders import OrderService
from foodorder.services.venues import VenueService

router = APIRouter(prefix="/merchant", tags=["Merchant"])

OWNERSHIP_ERRORS = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get("", response_model=AccountResponse)
async def merchant_account(principal: Principal = Depends(get_principal)) -> AccountResponse:
    require(principal.is_merchant, 'Invalid user type. Must be "merchant"')
    return AccountResponse(user_id=principal.user_id, user_type=principal.role)


# =============================================================================
# VENUES
# =============================================================================

@router.post("/venues", response_model=VenueEnvelope, status_code=201)
async def create_venue(
    data: VenueCreate,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> VenueEnvelope:
    venue = await venues.create_venue(principal, data)
    return VenueEnvelope(venue=VenueResponse.model_validate(venue))


@router.get("/venues", response_model=VenueListResponse)
async def list_my_venues(
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> VenueListResponse:
    found = await venues.list_merchant_venues(principal)
    return VenueListResponse(venues=[VenueResponse.model_validate(v) for v in found])


@router.get("/venues/{venue_id}", response_model=VenueEnvelope, responses=OWNERSHIP_ERRORS)
async def get_venue(
    venue_id: ResourceId,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> VenueEnvelope:
    venue = await venues.get_owned_venue(principal, venue_id)
    return VenueEnvelope(venue=VenueResponse.model_validate(venue))


@router.put("/venues/{venue_id}", response_model=VenueEnvelope, responses=OWNERSHIP_ERRORS)
async def update_venue(
    venue_id: ResourceId,
    data: VenueUpdate,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> VenueEnvelope:
    venue = await venues.update_venue(principal, venue_id, data)
    return VenueEnvelope(venue=VenueResponse.model_validate(venue))


@router.delete("/venues/{venue_id}", response_model=MessageResponse, responses=OWNERSHIP_ERRORS)
async def delete_venue(
    venue_id: ResourceId,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> MessageResponse:
    await venues.delete_venue(principal, venue_id)
    return MessageResponse(message="Venue deleted successfully")


# =============================================================================
# MENU ITEMS
# =============================================================================

@router.post(
    "/venues/{venue_id}/menuitems",
    response_model=MenuItemResponse,
    status_code=201,
    responses=OWNERSHIP_ERRORS,
)
async def create_menu_item(
    venue_id: ResourceId,
    data: MenuItemCreate,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> MenuItemResponse:
    item = await venues.create_menu_item(principal, venue_id, data)
    return MenuItemResponse.model_validate(item)


@router.get(
    "/venues/{venue_id}/menuitems",
    response_model=list[MenuItemResponse],
    responses=OWNERSHIP_ERRORS,
)
async def list_menu_items(
    venue_id: ResourceId,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> list[MenuItemResponse]:
    items = await venues.list_menu_items(principal, venue_id)
    return [MenuItemResponse.model_validate(item) for item in items]


@router.put(
    "/venues/{venue_id}/menuitems/{item_id}",
    response_model=MenuItemResponse,
    responses=OWNERSHIP_ERRORS,
)
async def update_menu_item(
    venue_id: ResourceId,
    item_id: ResourceId,
    data: MenuItemUpdate,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> MenuItemResponse:
    """Partial update. A new price only affects orders placed afterwards."""
    item = await venues.update_menu_item(principal, venue_id, item_id, data)
    return MenuItemResponse.model_validate(item)


@router.delete(
    "/venues/{venue_id}/menuitems/{item_id}",
    response_model=MessageResponse,
    responses=OWNERSHIP_ERRORS,
)
async def delete_menu_item(
    venue_id: ResourceId,
    item_id: ResourceId,
    principal: Principal = Depends(get_principal),
    venues: VenueService = Depends(get_venue_service),
) -> MessageResponse:
    await venues.delete_menu_item(principal, venue_id, item_id)
    return MessageResponse(message="Deleted menu item")


# =============================================================================
# ORDERS
# =============================================================================

@router.get(
    "/venues/{venue_id}/orders",
    response_model=list[OrderResponse],
    responses=OWNERSHIP_ERRORS,
)
async def list_venue_orders(
    venue_id: ResourceId,
    status: Optional[str] = Query(None),
    principal: Principal = Depends(get_principal),
    orders: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    """Orders placed at one of the caller's venues, newest first."""
    return await orders.list_for_venue(principal, venue_id, status)


@router.put(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={
        **OWNERSHIP_ERRORS,
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update Order Status",
)
async def update_order_status(
    order_id: ResourceId,
    data: OrderStatusUpdate,
    principal: Principal = Depends(get_principal),
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return await orders.update_status(order_id, data.status, principal)

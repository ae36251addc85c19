"""
Order Service

Operations behind the diner and merchant order endpoints:
    - place_order: diner places an order (priced, then written atomically)
    - update_status: merchant moves an order through its lifecycle
    - list_for_diner / get_for_diner: a diner's own orders
    - list_for_venue: orders of a venue, for the owning merchant

Every operation takes the caller's Principal explicitly.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from foodorder.core.errors import Conflict, NotFound, VenueNotFound
from foodorder.models import Order, OrderStatus
from foodorder.schemas import OrderItemResponse, OrderResponse
from foodorder.services.access import (
    can_manage_venue,
    can_place_order,
    can_view_order_as_diner,
    can_view_order_as_merchant,
    require,
    require_principal,
)
from foodorder.services.catalog.base import BaseCatalogGateway
from foodorder.services.identity.base import Principal
from foodorder.services.orders.lifecycle import ensure_transition, parse_status
from foodorder.services.orders.repository import OrderRepository
from foodorder.services.pricing import OrderLineRequest, OrderPricingEngine

logger = logging.getLogger(__name__)


def _parse_filter(status: Optional[str]) -> Optional[OrderStatus]:
    if not status:
        return None
    return parse_status(status)


def _minimal_response(order: Order) -> OrderResponse:
    """Build a response from the columns written at placement time only."""
    return OrderResponse(
        id=order.id,
        diner_id=order.diner_id,
        venue_id=order.venue_id,
        total_amount_in_cents=order.total_amount_in_cents,
        status=order.status,
        order_timestamp=order.order_timestamp,
        items=[
            OrderItemResponse(
                id=item.id,
                menu_item_id=item.menu_item_id,
                quantity=item.quantity,
                price_in_cents_at_order=item.price_in_cents_at_order,
            )
            for item in order.items
        ],
    )


class OrderService:
    """
    Order placement and fulfillment workflow.

    Attributes:
        repository: Order persistence
        pricing: Pricing engine used at placement
        catalog: Venue ownership lookups
        enforce_transitions: Reject status edges outside the lifecycle table
    """

    def __init__(
        self,
        repository: OrderRepository,
        pricing: OrderPricingEngine,
        catalog: BaseCatalogGateway,
        enforce_transitions: bool = True,
    ):
        self.repository = repository
        self.pricing = pricing
        self.catalog = catalog
        self.enforce_transitions = enforce_transitions

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    async def place_order(
        self,
        principal: Optional[Principal],
        venue_id: int,
        lines: Sequence[OrderLineRequest],
    ) -> OrderResponse:
        """
        Place an order for the calling diner.

        Returns:
            OrderResponse: The stored order with venue, diner and menu items

        Raises:
            Unauthenticated: No principal
            Forbidden: Caller is not a diner
            InvalidRequest: Empty cart or bad quantity
            VenueNotFound: Unknown venue
            ItemNotAvailable: Item missing or from another venue
            Internal: The write failed and was rolled back
        """
        principal = require_principal(principal)
        require(can_place_order(principal), "Only diners can place orders")

        pricing = await self.pricing.price_order(venue_id, lines)
        order = await self.repository.create_order_atomic(
            diner_id=principal.user_id,
            venue_id=pricing.venue.id,
            pricing=pricing,
        )
        logger.info(
            f"Order #{order.id} placed by diner {principal.user_id} at venue "
            f"{order.venue_id}: {len(pricing.lines)} lines, {order.total_amount_in_cents}c"
        )

        # The order is committed at this point; a failed re-read must not
        # turn into an error for the caller.
        try:
            stored = await self.repository.get_by_id(order.id)
        except (SQLAlchemyError, NotFound) as e:
            logger.warning(f"Order #{order.id} committed but re-read failed: {e}")
            return _minimal_response(order)

        return OrderResponse.model_validate(stored)

    # =========================================================================
    # STATUS
    # =========================================================================

    async def update_status(
        self,
        order_id: int,
        requested_status: Optional[str],
        principal: Optional[Principal],
    ) -> OrderResponse:
        """
        Move an order to a new status on behalf of the venue's merchant.

        Raises:
            Unauthenticated: No principal
            InvalidStatus: Unknown status literal
            Forbidden: Caller is not the merchant owning the order's venue
            NotFound: Unknown order
            InvalidTransition: Edge not allowed by the lifecycle
            Conflict: Status changed by a concurrent request
        """
        principal = require_principal(principal)
        target = parse_status(requested_status)
        require(
            principal.is_merchant,
            "Access forbidden: Only merchants can update order status.",
        )

        ownership = await self.repository.get_ownership(order_id)
        if ownership is None:
            raise NotFound(f"Order #{order_id} not found")
        require(
            can_view_order_as_merchant(principal, ownership.venue_owner_id),
            "You don't own the venue of this order",
        )

        if self.enforce_transitions:
            ensure_transition(ownership.status, target)

        updated = await self.repository.update_status(order_id, ownership.status, target)
        if not updated:
            raise Conflict(
                f"Order #{order_id} was modified by another request; reload and retry"
            )

        logger.info(
            f"Order #{order_id}: {ownership.status.value} -> {target.value} "
            f"by merchant {principal.user_id}"
        )
        return OrderResponse.model_validate(await self.repository.get_by_id(order_id))

    # =========================================================================
    # READS
    # =========================================================================

    async def list_for_diner(
        self,
        principal: Optional[Principal],
        status: Optional[str] = None,
    ) -> list[OrderResponse]:
        principal = require_principal(principal)
        require(principal.is_diner, "Only diners can view orders here.")
        status_filter = _parse_filter(status)

        orders = await self.repository.list_by_diner(principal.user_id, status_filter)
        return [OrderResponse.model_validate(order) for order in orders]

    async def get_for_diner(
        self,
        principal: Optional[Principal],
        order_id: int,
    ) -> OrderResponse:
        principal = require_principal(principal)
        require(principal.is_diner, "Only diners can view orders here.")

        order = await self.repository.get_by_id(order_id)
        require(
            can_view_order_as_diner(principal, order.diner_id),
            "You don't have permission to view this order.",
        )
        return OrderResponse.model_validate(order)

    async def list_for_venue(
        self,
        principal: Optional[Principal],
        venue_id: int,
        status: Optional[str] = None,
    ) -> list[OrderResponse]:
        principal = require_principal(principal)
        require(principal.is_merchant, "Only merchants can view venue orders.")
        status_filter = _parse_filter(status)

        venue = await self.catalog.get_venue(venue_id)
        if venue is None:
            raise VenueNotFound(f"Venue {venue_id} not found")
        require(
            can_manage_venue(principal, venue.owner_merchant_id),
            "You don't own this venue",
        )

        orders = await self.repository.list_by_venue(venue.id, status_filter)
        return [OrderResponse.model_validate(order) for order in orders]

"""
Order Pricing Engine

Resolves a diner's cart against a venue's live menu and computes the
authoritative total. Prices never come from the client.

Rules:
    - The cart must have at least one line.
    - Every quantity must be a positive integer that fits the quantity column.
    - All requested item ids are resolved in ONE lookup scoped to the
      venue, so an id from another venue is simply "not found".
    - A single unknown item fails the whole cart; nothing is priced.
    - Totals are integer cents. No float arithmetic.
    - A total too large for the money columns is rejected.
    - Output lines keep the caller's order.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from foodorder.core.errors import InvalidRequest, ItemNotAvailable, VenueNotFound
from foodorder.models import BIGINT_MAX, INTEGER_MAX
from foodorder.services.catalog.base import BaseCatalogGateway, VenueRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLineRequest:
    """One requested cart line, as sent by the diner."""
    menu_item_id: int
    quantity: Optional[int]


@dataclass(frozen=True)
class PricedLine:
    """
    A cart line with its price snapshot.

    Attributes:
        menu_item_id: Menu item ordered
        quantity: Units ordered (> 0)
        price_in_cents_at_order: Unit price frozen at placement time
    """
    menu_item_id: int
    quantity: int
    price_in_cents_at_order: int

    @property
    def line_total_in_cents(self) -> int:
        return self.quantity * self.price_in_cents_at_order


@dataclass(frozen=True)
class PricingResult:
    """Priced cart ready to be persisted."""
    venue: VenueRef
    lines: tuple[PricedLine, ...]
    total_in_cents: int


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= INTEGER_MAX


class OrderPricingEngine:
    """
    Prices carts against a catalog gateway.

    Example:
        >>> engine = OrderPricingEngine(catalog)
        >>> result = await engine.price_order(1, [OrderLineRequest(10, 3)])
        >>> result.total_in_cents
        1500
    """

    def __init__(self, catalog: BaseCatalogGateway):
        self.catalog = catalog

    def validate_lines(self, lines: Sequence[OrderLineRequest]) -> None:
        """
        Check the cart shape without touching the catalog.

        Raises:
            InvalidRequest: Empty cart, or a line with a bad id or quantity
        """
        if not lines:
            raise InvalidRequest("Order must contain at least one item")

        for position, line in enumerate(lines, start=1):
            if not _is_positive_int(line.menu_item_id):
                raise InvalidRequest(f"Line {position}: invalid menu item id")
            if not _is_positive_int(line.quantity):
                raise InvalidRequest(
                    f"Line {position}: quantity must be a positive integer"
                )

    async def price_order(
        self,
        venue_id: int,
        lines: Sequence[OrderLineRequest],
    ) -> PricingResult:
        """
        Price a cart for one venue.

        Args:
            venue_id: Venue the order is placed against
            lines: Requested lines in display order

        Returns:
            PricingResult: Priced lines (same order as requested) and total

        Raises:
            InvalidRequest: Empty cart, invalid quantity, or a total too large to store
            VenueNotFound: Venue does not exist
            ItemNotAvailable: Any item missing or belonging to another venue
        """
        self.validate_lines(lines)

        venue = await self.catalog.get_venue(venue_id)
        if venue is None:
            raise VenueNotFound(f"Venue {venue_id} not found")

        requested_ids = {line.menu_item_id for line in lines}
        menu = await self.catalog.get_menu_items(venue.id, requested_ids)

        missing = sorted(requested_ids - menu.keys())
        if missing:
            logger.info(f"Rejected cart for venue {venue.id}: unavailable items {missing}")
            raise ItemNotAvailable(
                f"Menu items not available in venue {venue.id}: "
                f"{', '.join(str(item_id) for item_id in missing)}"
            )

        priced = tuple(
            PricedLine(
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                price_in_cents_at_order=menu[line.menu_item_id].price_in_cents,
            )
            for line in lines
        )
        total = sum(line.line_total_in_cents for line in priced)
        if total > BIGINT_MAX:
            raise InvalidRequest("Order total exceeds the maximum supported amount")

        return PricingResult(venue=venue, lines=priced, total_in_cents=total)

"""
In-Memory Catalog Gateway

Serves a fixed set of venues and menu items without a database. Used by
the pricing engine tests and handy for local experiments.
"""

from typing import Iterable, Optional

from foodorder.services.catalog.base import BaseCatalogGateway, MenuItemRef, VenueRef


class InMemoryCatalogGateway(BaseCatalogGateway):
    """
    Catalog backed by plain dictionaries.

    Attributes:
        venues: Venue id -> VenueRef
        items: Menu item id -> MenuItemRef
        batch_lookups: Number of get_menu_items calls served
    """

    def __init__(
        self,
        venues: Iterable[VenueRef] = (),
        items: Iterable[MenuItemRef] = (),
    ):
        self.venues = {venue.id: venue for venue in venues}
        self.items = {item.id: item for item in items}
        self.batch_lookups = 0

    @property
    def provider_name(self) -> str:
        return "memory"

    def set_price(self, item_id: int, price_in_cents: int) -> None:
        item = self.items[item_id]
        self.items[item_id] = MenuItemRef(
            id=item.id,
            venue_id=item.venue_id,
            price_in_cents=price_in_cents,
            name=item.name,
        )

    async def get_venue(self, venue_id: int) -> Optional[VenueRef]:
        return self.venues.get(venue_id)

    async def get_menu_items(
        self,
        venue_id: int,
        item_ids: Iterable[int],
    ) -> dict[int, MenuItemRef]:
        self.batch_lookups += 1
        found = {}
        for item_id in set(item_ids):
            item = self.items.get(item_id)
            if item is not None and item.venue_id == venue_id:
                found[item_id] = item
        return found

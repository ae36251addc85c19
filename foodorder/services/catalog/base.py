"""
Catalog Gateway Abstract Base Class

Read-only view of venues and menu items as the ordering core needs them:
who owns a venue, and what a venue's items cost right now.

Design Pattern: Strategy Pattern
    - SQLCatalogGateway reads the live tables
    - InMemoryCatalogGateway serves fixed data for pricing tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class VenueRef:
    """
    Venue as seen by the ordering core.

    Attributes:
        id: Venue identifier
        owner_merchant_id: Merchant account that owns the venue
        name: Display name
    """
    id: int
    owner_merchant_id: int
    name: str = ""


@dataclass(frozen=True)
class MenuItemRef:
    """
    Menu item as seen by the ordering core.

    Attributes:
        id: Menu item identifier
        venue_id: Venue the item belongs to
        price_in_cents: Current price in the smallest currency unit
        name: Display name
    """
    id: int
    venue_id: int
    price_in_cents: int
    name: str = ""


class BaseCatalogGateway(ABC):
    """
    Abstract base class for catalog lookups.

    Soft-deleted venues and items are invisible through every method.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the catalog backend (e.g. "sql", "memory")."""

    @abstractmethod
    async def get_venue(self, venue_id: int) -> Optional[VenueRef]:
        """
        Look up a venue.

        Returns:
            VenueRef if the venue exists, None otherwise
        """

    @abstractmethod
    async def get_menu_items(
        self,
        venue_id: int,
        item_ids: Iterable[int],
    ) -> dict[int, MenuItemRef]:
        """
        Resolve a set of menu item ids in one batch, scoped to one venue.

        Items that do not exist, or that belong to another venue, are
        simply absent from the result.

        Args:
            venue_id: Venue the items must belong to
            item_ids: Requested ids (duplicates are ignored)

        Returns:
            dict: Menu item id -> MenuItemRef
        """

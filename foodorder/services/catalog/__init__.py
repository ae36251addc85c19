"""
Catalog Gateway Package

Usage:
    from foodorder.services.catalog import SQLCatalogGateway

    catalog = SQLCatalogGateway(session_factory)
    venue = await catalog.get_venue(venue_id)
    items = await catalog.get_menu_items(venue_id, [1, 2, 3])
"""

from foodorder.services.catalog.base import BaseCatalogGateway, MenuItemRef, VenueRef
from foodorder.services.catalog.memory import InMemoryCatalogGateway
from foodorder.services.catalog.sql import SQLCatalogGateway

__all__ = [
    "BaseCatalogGateway",
    "MenuItemRef",
    "VenueRef",
    "InMemoryCatalogGateway",
    "SQLCatalogGateway",
]

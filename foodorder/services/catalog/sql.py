"""
SQL Catalog Gateway

Reads venues and menu items from the database through an injected
session factory. No caching: every lookup sees the current prices.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodorder.models import MenuItem, Venue
from foodorder.services.catalog.base import BaseCatalogGateway, MenuItemRef, VenueRef

logger = logging.getLogger(__name__)


class SQLCatalogGateway(BaseCatalogGateway):
    """Catalog lookups against the venues and menu_items tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @property
    def provider_name(self) -> str:
        return "sql"

    async def get_venue(self, venue_id: int) -> Optional[VenueRef]:
        query = select(Venue.id, Venue.merchant_id, Venue.name).where(
            Venue.id == venue_id,
            Venue.deleted_at.is_(None),
        )
        async with self._session_factory() as session:
            row = (await session.execute(query)).one_or_none()

        if row is None:
            return None
        return VenueRef(id=row.id, owner_merchant_id=row.merchant_id, name=row.name)

    async def get_menu_items(
        self,
        venue_id: int,
        item_ids: Iterable[int],
    ) -> dict[int, MenuItemRef]:
        distinct_ids = set(item_ids)
        if not distinct_ids:
            return {}

        query = select(
            MenuItem.id,
            MenuItem.venue_id,
            MenuItem.price_in_cents,
            MenuItem.name,
        ).where(
            MenuItem.id.in_(distinct_ids),
            MenuItem.venue_id == venue_id,
            MenuItem.deleted_at.is_(None),
        )
        async with self._session_factory() as session:
            rows = (await session.execute(query)).all()

        logger.debug(
            f"Resolved {len(rows)}/{len(distinct_ids)} menu items for venue {venue_id}"
        )
        return {
            row.id: MenuItemRef(
                id=row.id,
                venue_id=row.venue_id,
                price_in_cents=int(row.price_in_cents),
                name=row.name,
            )
            for row in rows
        }

"""
Venue & Menu Service

Merchant management of venues and their menu items, plus the public
read-only views diners browse. Deletes are soft: the row gets a
``deleted_at`` timestamp and disappears from every read, while orders
that reference it keep their price snapshots.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodorder.core.errors import InvalidRequest, NotFound, VenueNotFound
from foodorder.models import MenuItem, Venue
from foodorder.schemas import MenuItemCreate, MenuItemUpdate, VenueCreate, VenueUpdate
from foodorder.services.access import can_manage_venue, require, require_principal
from foodorder.services.identity.base import Principal

logger = logging.getLogger(__name__)


class VenueService:
    """Venue and menu item persistence with ownership checks."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    async def _load_venue(session: AsyncSession, venue_id: int) -> Venue:
        result = await session.execute(
            select(Venue).where(Venue.id == venue_id, Venue.deleted_at.is_(None))
        )
        venue = result.scalar_one_or_none()
        if venue is None:
            raise VenueNotFound(f"Venue {venue_id} not found")
        return venue

    async def _owned_venue(
        self,
        session: AsyncSession,
        principal: Optional[Principal],
        venue_id: int,
    ) -> Venue:
        principal = require_principal(principal)
        venue = await self._load_venue(session, venue_id)
        require(can_manage_venue(principal, venue.merchant_id), "You don't own this venue")
        return venue

    @staticmethod
    async def _load_item(session: AsyncSession, venue_id: int, item_id: int) -> MenuItem:
        result = await session.execute(
            select(MenuItem).where(
                MenuItem.id == item_id,
                MenuItem.venue_id == venue_id,
                MenuItem.deleted_at.is_(None),
            )
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFound(f"Menu item {item_id} not found in venue {venue_id}")
        return item

    # =========================================================================
    # VENUES
    # =========================================================================

    async def create_venue(self, principal: Optional[Principal], data: VenueCreate) -> Venue:
        principal = require_principal(principal)
        require(principal.is_merchant, "Only a Merchant can add a venue")

        venue = Venue(**data.model_dump(), merchant_id=principal.user_id)
        async with self._session_factory() as session:
            session.add(venue)
            await session.commit()
            await session.refresh(venue)

        logger.info(f"Venue #{venue.id} created by merchant {principal.user_id}")
        return venue

    async def list_merchant_venues(self, principal: Optional[Principal]) -> list[Venue]:
        principal = require_principal(principal)
        require(principal.is_merchant, "Access forbidden. Only a Merchant can get venues.")

        query = (
            select(Venue)
            .where(Venue.merchant_id == principal.user_id, Venue.deleted_at.is_(None))
            .order_by(Venue.id)
        )
        async with self._session_factory() as session:
            return list((await session.execute(query)).scalars().all())

    async def get_venue(self, venue_id: int) -> Venue:
        async with self._session_factory() as session:
            return await self._load_venue(session, venue_id)

    async def get_owned_venue(self, principal: Optional[Principal], venue_id: int) -> Venue:
        async with self._session_factory() as session:
            return await self._owned_venue(session, principal, venue_id)

    async def list_public_venues(self) -> list[Venue]:
        query = select(Venue).where(Venue.deleted_at.is_(None)).order_by(Venue.id)
        async with self._session_factory() as session:
            return list((await session.execute(query)).scalars().all())

    async def update_venue(
        self,
        principal: Optional[Principal],
        venue_id: int,
        data: VenueUpdate,
    ) -> Venue:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            if not changes:
                raise InvalidRequest("No update fields provided")
            for field, value in changes.items():
                setattr(venue, field, value)
            await session.commit()
            await session.refresh(venue)
        return venue

    async def delete_venue(self, principal: Optional[Principal], venue_id: int) -> None:
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            venue.deleted_at = datetime.now(timezone.utc)
            await session.commit()
        logger.info(f"Venue #{venue_id} deleted")

    # =========================================================================
    # MENU ITEMS
    # =========================================================================

    async def create_menu_item(
        self,
        principal: Optional[Principal],
        venue_id: int,
        data: MenuItemCreate,
    ) -> MenuItem:
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            item = MenuItem(**data.model_dump(), venue_id=venue.id)
            session.add(item)
            await session.commit()
            await session.refresh(item)
        return item

    async def list_menu_items(
        self,
        principal: Optional[Principal],
        venue_id: int,
    ) -> list[MenuItem]:
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            return await self._menu(session, venue.id)

    async def list_public_menu(self, venue_id: int) -> list[MenuItem]:
        async with self._session_factory() as session:
            venue = await self._load_venue(session, venue_id)
            return await self._menu(session, venue.id)

    @staticmethod
    async def _menu(session: AsyncSession, venue_id: int) -> list[MenuItem]:
        query = (
            select(MenuItem)
            .where(MenuItem.venue_id == venue_id, MenuItem.deleted_at.is_(None))
            .order_by(MenuItem.id)
        )
        return list((await session.execute(query)).scalars().all())

    async def update_menu_item(
        self,
        principal: Optional[Principal],
        venue_id: int,
        item_id: int,
        data: MenuItemUpdate,
    ) -> MenuItem:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            item = await self._load_item(session, venue.id, item_id)
            if not changes:
                raise InvalidRequest("No update fields provided")
            for field, value in changes.items():
                setattr(item, field, value)
            await session.commit()
            await session.refresh(item)

        if "price_in_cents" in changes:
            logger.info(f"Menu item #{item_id} repriced to {item.price_in_cents}c")
        return item

    async def delete_menu_item(
        self,
        principal: Optional[Principal],
        venue_id: int,
        item_id: int,
    ) -> None:
        async with self._session_factory() as session:
            venue = await self._owned_venue(session, principal, venue_id)
            item = await self._load_item(session, venue.id, item_id)
            item.deleted_at = datetime.now(timezone.utc)
            await session.commit()

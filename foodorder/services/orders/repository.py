"""
Order Repository

Persists orders with their lines as one unit and reads order graphs back
with lines, menu items, venue and diner eagerly loaded.

Transactions are scoped with ``transaction()``: the session commits when
the block exits normally and rolls back on every other exit, including
cancellation of the request task.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from foodorder.core.errors import Internal, NotFound
from foodorder.models import Order, OrderItem, OrderStatus, Venue
from foodorder.services.orders.lifecycle import INITIAL_STATUS
from foodorder.services.pricing import PricedLine, PricingResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderOwnership:
    """Who an order belongs to, read through a join with its venue."""
    order_id: int
    status: OrderStatus
    venue_id: int
    diner_id: int
    venue_owner_id: int


class OrderRepository:
    """
    Database access for orders.

    Attributes:
        session_factory: Injected async session factory
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    # =========================================================================
    # WRITES
    # =========================================================================

    async def create_order_atomic(
        self,
        diner_id: int,
        venue_id: int,
        pricing: PricingResult,
        placed_at: Optional[datetime] = None,
    ) -> Order:
        """
        Write an order and all of its lines in a single transaction.

        Args:
            diner_id: Diner placing the order
            venue_id: Venue the order is placed against
            pricing: Priced lines and total
            placed_at: Order timestamp (defaults to now, UTC)

        Returns:
            Order: The persisted order with ``items`` populated

        Raises:
            Internal: If the database rejects any write; nothing is kept
        """
        placed_at = placed_at or datetime.now(timezone.utc)

        try:
            async with self.transaction() as session:
                order = Order(
                    diner_id=diner_id,
                    venue_id=venue_id,
                    total_amount_in_cents=pricing.total_in_cents,
                    status=INITIAL_STATUS,
                    order_timestamp=placed_at,
                    items=[],
                )
                session.add(order)
                await session.flush()

                await self._add_lines(session, order, pricing.lines)
        except SQLAlchemyError as e:
            logger.error(f"Order creation for diner {diner_id} rolled back: {e}")
            raise Internal("Failed to create order") from e

        return order

    async def _add_lines(
        self,
        session: AsyncSession,
        order: Order,
        lines: Sequence[PricedLine],
    ) -> None:
        for line in lines:
            order.items.append(
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    price_in_cents_at_order=line.price_in_cents_at_order,
                )
            )
        await session.flush()

    async def update_status(
        self,
        order_id: int,
        expected: OrderStatus,
        new_status: OrderStatus,
    ) -> bool:
        """
        Conditionally change an order's status in one UPDATE statement.

        The row is only touched if its status is still ``expected``.

        Returns:
            bool: True if the row was updated
        """
        statement = (
            update(Order)
            .where(
                Order.id == order_id,
                Order.status == expected,
                Order.deleted_at.is_(None),
            )
            .values(status=new_status)
        )
        try:
            async with self.transaction() as session:
                result = await session.execute(statement)
                updated = result.rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Status update for order #{order_id} failed: {e}")
            raise Internal("Failed to update order status") from e

        return updated

    # =========================================================================
    # READS
    # =========================================================================

    @staticmethod
    def _detail_query():
        return (
            select(Order)
            .where(Order.deleted_at.is_(None))
            .options(
                selectinload(Order.items).selectinload(OrderItem.menu_item),
                selectinload(Order.venue),
                selectinload(Order.diner),
            )
        )

    async def get_by_id(self, order_id: int) -> Order:
        """
        Load one order graph.

        Raises:
            NotFound: If there is no such order
        """
        query = self._detail_query().where(Order.id == order_id)
        async with self._session_factory() as session:
            order = (await session.execute(query)).scalar_one_or_none()

        if order is None:
            raise NotFound(f"Order #{order_id} not found")
        return order

    async def _list(self, *criteria) -> list[Order]:
        query = (
            self._detail_query()
            .where(*criteria)
            .order_by(Order.order_timestamp.desc(), Order.id.desc())
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def list_by_venue(
        self,
        venue_id: int,
        status: Optional[OrderStatus] = None,
    ) -> list[Order]:
        """Orders for a venue, newest first. Empty list when none match."""
        criteria = [Order.venue_id == venue_id]
        if status is not None:
            criteria.append(Order.status == status)
        return await self._list(*criteria)

    async def list_by_diner(
        self,
        diner_id: int,
        status: Optional[OrderStatus] = None,
    ) -> list[Order]:
        """Orders placed by a diner, newest first. Empty list when none match."""
        criteria = [Order.diner_id == diner_id]
        if status is not None:
            criteria.append(Order.status == status)
        return await self._list(*criteria)

    async def get_ownership(self, order_id: int) -> Optional[OrderOwnership]:
        query = (
            select(
                Order.id,
                Order.status,
                Order.venue_id,
                Order.diner_id,
                Venue.merchant_id,
            )
            .join(Venue, Venue.id == Order.venue_id)
            .where(Order.id == order_id, Order.deleted_at.is_(None))
        )
        async with self._session_factory() as session:
            row = (await session.execute(query)).one_or_none()

        if row is None:
            return None
        return OrderOwnership(
            order_id=row.id,
            status=row.status,
            venue_id=row.venue_id,
            diner_id=row.diner_id,
            venue_owner_id=row.merchant_id,
        )

"""
SQLAlchemy Database Models

Tables for the ordering backend:
- Users (diners and merchants)
- Venues and their menu items (soft-deleted via deleted_at)
- Orders and order lines with a frozen price snapshot

All money columns hold integer cents.
"""

import enum

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from foodorder.database import Base

# Largest values the Integer and BigInteger columns hold on every backend
INTEGER_MAX = 2**31 - 1
BIGINT_MAX = 2**63 - 1


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Role(str, enum.Enum):
    """Account role carried in every bearer token."""
    DINER = "diner"
    MERCHANT = "merchant"


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"  # Rejected by merchant
    CANCELLED = "Cancelled"
    PREPARING = "Preparing"
    READY_FOR_DELIVERY = "ReadyForDelivery"
    COMPLETED = "Completed"


class User(Base):
    """Registered account, either a diner or a merchant."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    user_type = Column(
        Enum(Role, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.user_type.value}>"


class Venue(Base):
    """A merchant-owned establishment with a menu."""
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    address = Column(String(255), nullable=True)
    lat_long = Column(String(64), nullable=True)
    description = Column(Text, nullable=True)
    cuisine_type = Column(String(100), nullable=True)
    merchant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    merchant = relationship("User")
    menu_items = relationship("MenuItem", back_populates="venue")

    def __repr__(self):
        return f"<Venue #{self.id} - {self.name} - merchant {self.merchant_id}>"


class MenuItem(Base):
    """A priced, venue-scoped product."""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price_in_cents = Column(BigInteger, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    venue = relationship("Venue", back_populates="menu_items")

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.price_in_cents}c>"


class Order(Base):
    """
    A diner's placed purchase against one venue's menu.

    Created together with all of its lines in one transaction; afterwards
    only ``status`` (and ``updated_at``) ever change.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    diner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    total_amount_in_cents = Column(BigInteger, nullable=False)
    status = Column(
        Enum(OrderStatus, values_callable=_enum_values, native_enum=False, length=32),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )
    order_timestamp = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    diner = relationship("User")
    venue = relationship("Venue")
    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order #{self.id} - venue {self.venue_id} - {self.status.value}>"


class OrderItem(Base):
    """One order line; ``price_in_cents_at_order`` never changes after placement."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_in_cents_at_order = Column(BigInteger, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

    def __repr__(self):
        return f"<OrderItem #{self.id} - {self.quantity}x item {self.menu_item_id}>"

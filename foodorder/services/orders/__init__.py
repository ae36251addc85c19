"""
Orders Package

Repository, lifecycle rules and the service tying pricing, access
policy and persistence together.
"""

from foodorder.services.orders.lifecycle import TRANSITIONS, parse_status
from foodorder.services.orders.repository import OrderOwnership, OrderRepository
from foodorder.services.orders.service import OrderService

__all__ = [
    "TRANSITIONS",
    "parse_status",
    "OrderOwnership",
    "OrderRepository",
    "OrderService",
]

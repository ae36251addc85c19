"""
Order Status Lifecycle

    Pending          -> Accepted | Rejected | Cancelled
    Accepted         -> Preparing | Cancelled
    Preparing        -> ReadyForDelivery | Cancelled
    ReadyForDelivery -> Completed
    Cancelled, Rejected, Completed are terminal.

Every order starts as Pending.
"""

from typing import Optional

from foodorder.core.errors import InvalidStatus, InvalidTransition
from foodorder.models import OrderStatus

INITIAL_STATUS = OrderStatus.PENDING

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({
        OrderStatus.ACCEPTED,
        OrderStatus.REJECTED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.ACCEPTED: frozenset({
        OrderStatus.PREPARING,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.PREPARING: frozenset({
        OrderStatus.READY_FOR_DELIVERY,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.READY_FOR_DELIVERY: frozenset({
        OrderStatus.COMPLETED,
    }),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
}


def parse_status(value: Optional[str]) -> OrderStatus:
    """
    Convert a status literal into an OrderStatus.

    Literals are case-sensitive and must match exactly (e.g. "ReadyForDelivery").

    Raises:
        InvalidStatus: If the literal is not one of the seven statuses
    """
    try:
        return OrderStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in OrderStatus)
        raise InvalidStatus(f"Invalid status value '{value}'. Must be one of: {valid}")


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    """Raise InvalidTransition unless ``current -> target`` is in the table."""
    if not can_transition(current, target):
        if is_terminal(current):
            raise InvalidTransition(
                f"Order is {current.value}; no further status changes are allowed"
            )
        allowed = ", ".join(sorted(s.value for s in TRANSITIONS[current]))
        raise InvalidTransition(
            f"Cannot change status from {current.value} to {target.value}. "
            f"Allowed: {allowed}"
        )

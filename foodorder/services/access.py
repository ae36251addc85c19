"""
Access Policy

Pure predicates deciding who may do what. They never touch the
database; callers load whatever ownership data the predicate needs.

``require_principal`` must run before any role predicate so that an
anonymous caller is always reported as Unauthenticated, never Forbidden.
"""

from typing import Optional

from foodorder.core.errors import Forbidden, Unauthenticated
from foodorder.services.identity.base import Principal


def can_place_order(principal: Principal) -> bool:
    return principal.is_diner


def can_manage_venue(principal: Principal, owner_merchant_id: int) -> bool:
    return principal.is_merchant and owner_merchant_id == principal.user_id


def can_view_order_as_merchant(principal: Principal, venue_owner_id: int) -> bool:
    # Ownership is resolved through the order's venue.
    return principal.is_merchant and venue_owner_id == principal.user_id


def can_view_order_as_diner(principal: Principal, order_diner_id: int) -> bool:
    return principal.is_diner and order_diner_id == principal.user_id


def require_principal(principal: Optional[Principal]) -> Principal:
    """Return the principal or raise Unauthenticated."""
    if principal is None:
        raise Unauthenticated("User isn't authenticated")
    return principal


def require(decision: bool, message: str) -> None:
    """Raise Forbidden with ``message`` unless ``decision`` holds."""
    if not decision:
        raise Forbidden(message)

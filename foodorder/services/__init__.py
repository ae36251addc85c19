"""
                        Services Module

Business logic behind the HTTP surface. Every service receives its
database session factory (and any collaborators) explicitly.

Services:
    - identity: bearer token issuing and verification
    - catalog: read-only venue/menu lookups for the ordering core
    - pricing: cart pricing against a venue's live menu
    - access: role and ownership predicates
    - orders: order repository, lifecycle and workflow
    - accounts: registration and login
    - venues: venue and menu item management
"""

from foodorder.services.pricing import OrderPricingEngine

__all__ = ["OrderPricingEngine"]

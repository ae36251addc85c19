"""
Error Taxonomy

Every failure a caller can observe is one of these exceptions. Services
raise them; the FastAPI exception handlers in ``foodorder.main`` render
them as ``ErrorResponse`` bodies with the matching HTTP status.
"""

from typing import Optional


class FoodOrderError(Exception):
    """
    Base class for all domain errors.

    Attributes:
        code: Machine-readable error name (e.g. "ItemNotAvailable")
        status_code: HTTP status used when rendered by the API
        message: Human-readable description
    """

    code = "Internal"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.code, "detail": self.message}


class Unauthenticated(FoodOrderError):
    code = "Unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(FoodOrderError):
    code = "Forbidden"
    status_code = 403
    default_message = "You are not allowed to perform this action"


class InvalidRequest(FoodOrderError):
    code = "InvalidRequest"
    status_code = 400
    default_message = "Invalid request"


class ItemNotAvailable(FoodOrderError):
    code = "ItemNotAvailable"
    status_code = 400
    default_message = "Invalid menu item ID, or item not found in this venue"


class NotFound(FoodOrderError):
    code = "NotFound"
    status_code = 404
    default_message = "Resource not found"


class VenueNotFound(NotFound):
    code = "VenueNotFound"
    default_message = "Venue not found"


class InvalidStatus(FoodOrderError):
    code = "InvalidStatus"
    status_code = 400
    default_message = "Invalid status value"


class InvalidTransition(FoodOrderError):
    code = "InvalidTransition"
    status_code = 409
    default_message = "Order status transition is not allowed"


class Conflict(FoodOrderError):
    code = "Conflict"
    status_code = 409
    default_message = "Resource conflict"


class Internal(FoodOrderError):
    pass

"""
Pydantic Schemas for Request/Response Validation

Covers accounts, venues, menu items and orders. All prices are integer
cents; field names are snake_case on the wire.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from foodorder.models import BIGINT_MAX, INTEGER_MAX, OrderStatus, Role

# bcrypt only looks at the first 72 bytes and current releases reject longer input
PASSWORD_MAX_BYTES = 72


# =============================================================================
# ACCOUNT SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    """Request schema for creating an account."""
    email: str = Field(..., max_length=255, examples=["diner@example.com"])
    password: str = Field(..., min_length=8, max_length=20)
    user_type: Role = Field(..., examples=["diner", "merchant"])

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(r'^[\w\.\+-]+@[\w\.-]+\.\w+$', v):
            raise ValueError('Invalid email format')
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f'Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8')
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    """Public view of an account; never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    user_type: Role


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class AccountResponse(BaseModel):
    """Identity carried by the caller's token."""
    user_id: int
    user_type: Role


# =============================================================================
# VENUE SCHEMAS
# =============================================================================

class VenueCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    cuisine_type: str = Field(..., min_length=1, max_length=100)


class VenueUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=255)
    lat_long: Optional[str] = Field(None, max_length=64)
    description: Optional[str] = None
    cuisine_type: Optional[str] = Field(None, max_length=100)


class VenueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: Optional[str]
    lat_long: Optional[str]
    description: Optional[str]
    cuisine_type: Optional[str]
    merchant_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VenueEnvelope(BaseModel):
    venue: VenueResponse


class VenueListResponse(BaseModel):
    venues: List[VenueResponse]


# =============================================================================
# MENU ITEM SCHEMAS
# =============================================================================

class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Pizza Margherita"])
    description: str = Field(..., min_length=1)
    price_in_cents: int = Field(..., gt=0, le=BIGINT_MAX, examples=[1499])
    category: str = Field(..., min_length=1, max_length=100, examples=["pizza"])


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price_in_cents: Optional[int] = Field(None, gt=0, le=BIGINT_MAX)
    category: Optional[str] = Field(None, max_length=100)


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str]
    price_in_cents: int
    category: Optional[str]
    venue_id: int


# =============================================================================
# ORDER REQUEST SCHEMAS
# =============================================================================

class OrderItemRequest(BaseModel):
    """
    Single line of a cart.

    Quantity is deliberately loose here so the pricing engine can report
    which line is wrong instead of a generic validation error.
    """
    menu_item_id: int = Field(..., ge=1, le=INTEGER_MAX, examples=[1])
    quantity: Optional[int] = Field(None, examples=[2])


class OrderCreate(BaseModel):
    """Request schema for placing a new order."""
    venue_id: int = Field(..., ge=1, le=INTEGER_MAX, examples=[1])
    items: List[OrderItemRequest] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., examples=["Accepted"])


# =============================================================================
# ORDER RESPONSE SCHEMAS
# =============================================================================

class MenuItemSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price_in_cents: int
    category: Optional[str] = None


class VenueSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    merchant_id: int


class DinerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    menu_item_id: int
    quantity: int
    price_in_cents_at_order: int
    menu_item: Optional[MenuItemSummary] = None


class OrderResponse(BaseModel):
    """
    Full order graph.

    ``venue``, ``diner`` and ``items[].menu_item`` are absent only when
    the order was written but could not be re-read afterwards.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    diner_id: int
    venue_id: int
    total_amount_in_cents: int
    status: OrderStatus
    order_timestamp: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    venue: Optional[VenueSummary] = None
    diner: Optional[DinerSummary] = None


# =============================================================================
# GENERIC RESPONSES
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime

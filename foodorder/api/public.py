"""
Public Routes (no token needed)

    - GET /public/venues
    - GET /public/venues/{venue_id}
    - GET /public/venues/{venue_id}/menu
"""

from fastapi import APIRouter, Depends

from foodorder.api.dependencies import ResourceId, get_venue_service
from foodorder.schemas import (
    ErrorResponse,
    MenuItemResponse,
    VenueEnvelope,
    VenueListResponse,
    VenueResponse,
)
from foodorder.services.venues import VenueService

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/venues", response_model=VenueListResponse)
async def list_venues(
    venues: VenueService = Depends(get_venue_service),
) -> VenueListResponse:
    """List all active venues."""
    found = await venues.list_public_venues()
    return VenueListResponse(venues=[VenueResponse.model_validate(v) for v in found])


@router.get(
    "/venues/{venue_id}",
    response_model=VenueEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def get_venue(
    venue_id: ResourceId,
    venues: VenueService = Depends(get_venue_service),
) -> VenueEnvelope:
    venue = await venues.get_venue(venue_id)
    return VenueEnvelope(venue=VenueResponse.model_validate(venue))


@router.get(
    "/venues/{venue_id}/menu",
    response_model=list[MenuItemResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_venue_menu(
    venue_id: ResourceId,
    venues: VenueService = Depends(get_venue_service),
) -> list[MenuItemResponse]:
    """Menu of a venue as diners see it."""
    items = await venues.list_public_menu(venue_id)
    return [MenuItemResponse.model_validate(item) for item in items]

"""
FastAPI Dependencies

Pulls the injected handles (settings, session factory, identity service)
off ``app.state`` and builds per-request services from them. The bearer
token is turned into a typed Principal here and passed explicitly to
every service call.
"""

from typing import Annotated, Optional

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from foodorder.core.config import Settings
from foodorder.core.errors import Unauthenticated
from foodorder.models import INTEGER_MAX
from foodorder.services.accounts import AccountService
from foodorder.services.catalog import SQLCatalogGateway
from foodorder.services.identity import BaseIdentityService, Principal
from foodorder.services.orders import OrderRepository, OrderService
from foodorder.services.pricing import OrderPricingEngine
from foodorder.services.venues import VenueService

bearer_scheme = HTTPBearer(auto_error=False)

# Path ids are bounded to the id column range so oversized values fail validation
ResourceId = Annotated[int, Path(ge=1, le=INTEGER_MAX)]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_identity_service(request: Request) -> BaseIdentityService:
    return request.app.state.identity_service


async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: BaseIdentityService = Depends(get_identity_service),
) -> Principal:
    """Authenticate the caller from the ``Authorization: Bearer`` header."""
    if credentials is None:
        raise Unauthenticated(
            "Authorization header is missing or does not use the Bearer scheme"
        )
    return identity.authenticate(credentials.credentials)


def get_order_service(
    settings: Settings = Depends(get_app_settings),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> OrderService:
    catalog = SQLCatalogGateway(session_factory)
    return OrderService(
        repository=OrderRepository(session_factory),
        pricing=OrderPricingEngine(catalog),
        catalog=catalog,
        enforce_transitions=settings.enforce_status_transitions,
    )


def get_venue_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> VenueService:
    return VenueService(session_factory)


def get_account_service(
    settings: Settings = Depends(get_app_settings),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    identity: BaseIdentityService = Depends(get_identity_service),
) -> AccountService:
    return AccountService(session_factory, identity, bcrypt_rounds=settings.bcrypt_rounds)

"""
Shared fixtures: a fresh in-memory SQLite database per test, seeded
accounts, venues and menu items, and an HTTP client bound to the app.
"""

from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from foodorder.core.config import Settings
from foodorder.database import create_session_factory, init_db
from foodorder.main import create_app
from foodorder.models import MenuItem, Role, User, Venue
from foodorder.services.catalog import SQLCatalogGateway
from foodorder.services.identity import Principal, build_identity_service
from foodorder.services.orders import OrderRepository, OrderService
from foodorder.services.pricing import OrderLineRequest, OrderPricingEngine

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings():
    return Settings(
        env_mode="development",
        database_url=TEST_DATABASE_URL,
        jwt_secret="test-secret-key-with-enough-length",
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture
async def engine():
    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def identity(settings):
    return build_identity_service(settings)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """
    Two diners, two merchants, one venue each with menu items:

        venue (merchant): burger 500c, fries 250c
        other_venue (other_merchant): salad 900c
    """
    async with session_factory() as session:
        diner = User(email="diner@example.com", password_hash="x", user_type=Role.DINER)
        other_diner = User(email="other.diner@example.com", password_hash="x", user_type=Role.DINER)
        merchant = User(email="merchant@example.com", password_hash="x", user_type=Role.MERCHANT)
        other_merchant = User(
            email="other.merchant@example.com", password_hash="x", user_type=Role.MERCHANT
        )
        session.add_all([diner, other_diner, merchant, other_merchant])
        await session.flush()

        venue = Venue(
            name="Burger Barn",
            address="1 Main St",
            description="Burgers",
            cuisine_type="american",
            merchant_id=merchant.id,
        )
        other_venue = Venue(
            name="Green Bowl",
            address="2 Side St",
            description="Salads",
            cuisine_type="healthy",
            merchant_id=other_merchant.id,
        )
        session.add_all([venue, other_venue])
        await session.flush()

        burger = MenuItem(name="Burger", price_in_cents=500, category="mains", venue_id=venue.id)
        fries = MenuItem(name="Fries", price_in_cents=250, category="sides", venue_id=venue.id)
        salad = MenuItem(name="Salad", price_in_cents=900, category="mains", venue_id=other_venue.id)
        session.add_all([burger, fries, salad])
        await session.commit()

    return SimpleNamespace(
        diner=Principal(diner.id, Role.DINER),
        other_diner=Principal(other_diner.id, Role.DINER),
        merchant=Principal(merchant.id, Role.MERCHANT),
        other_merchant=Principal(other_merchant.id, Role.MERCHANT),
        venue_id=venue.id,
        other_venue_id=other_venue.id,
        burger_id=burger.id,
        fries_id=fries.id,
        salad_id=salad.id,
    )


@pytest.fixture
def repository(session_factory):
    return OrderRepository(session_factory)


@pytest.fixture
def order_service(session_factory, repository):
    catalog = SQLCatalogGateway(session_factory)
    return OrderService(repository, OrderPricingEngine(catalog), catalog)


@pytest.fixture
def place(order_service):
    """Place an order from ``(menu_item_id, quantity)`` pairs."""
    async def _place(principal, venue_id, *lines):
        requested = [OrderLineRequest(item_id, quantity) for item_id, quantity in lines]
        return await order_service.place_order(principal, venue_id, requested)

    return _place


@pytest_asyncio.fixture
async def client(settings, session_factory, identity):
    app = create_app(
        settings=settings,
        session_factory=session_factory,
        identity_service=identity,
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def auth(identity):
    """Authorization header for a Principal."""
    def _auth(principal):
        token = identity.issue_token(principal.user_id, principal.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth


@pytest.fixture
def count_rows(session_factory):
    """Number of rows in a mapped table."""
    async def _count(model) -> int:
        async with session_factory() as session:
            query = select(func.count()).select_from(model)
            return (await session.execute(query)).scalar_one()

    return _count

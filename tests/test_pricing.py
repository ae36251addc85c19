"""Order pricing against an in-memory catalog."""

import pytest

from foodorder.core.errors import InvalidRequest, ItemNotAvailable, VenueNotFound
from foodorder.models import BIGINT_MAX, INTEGER_MAX
from foodorder.services.catalog import InMemoryCatalogGateway, MenuItemRef, VenueRef
from foodorder.services.pricing import OrderLineRequest, OrderPricingEngine

VENUE_V = 1
VENUE_W = 2


@pytest.fixture
def catalog():
    return InMemoryCatalogGateway(
        venues=[
            VenueRef(id=VENUE_V, owner_merchant_id=100, name="V"),
            VenueRef(id=VENUE_W, owner_merchant_id=200, name="W"),
        ],
        items=[
            MenuItemRef(id=10, venue_id=VENUE_V, price_in_cents=500, name="Burger"),
            MenuItemRef(id=11, venue_id=VENUE_V, price_in_cents=250, name="Fries"),
            MenuItemRef(id=12, venue_id=VENUE_V, price_in_cents=199, name="Soda"),
            MenuItemRef(id=20, venue_id=VENUE_W, price_in_cents=900, name="Salad"),
        ],
    )


@pytest.fixture
def engine(catalog):
    return OrderPricingEngine(catalog)


async def test_single_line_total(engine):
    result = await engine.price_order(VENUE_V, [OrderLineRequest(10, 3)])

    assert result.total_in_cents == 1500
    assert isinstance(result.total_in_cents, int)
    assert result.venue.id == VENUE_V
    assert result.lines[0].price_in_cents_at_order == 500


async def test_total_is_sum_of_line_totals(engine):
    lines = [OrderLineRequest(11, 2), OrderLineRequest(10, 1), OrderLineRequest(12, 3)]

    result = await engine.price_order(VENUE_V, lines)

    assert [line.line_total_in_cents for line in result.lines] == [500, 500, 597]
    assert result.total_in_cents == 1597


async def test_lines_keep_request_order_including_repeats(engine):
    lines = [OrderLineRequest(12, 1), OrderLineRequest(10, 2), OrderLineRequest(12, 4)]

    result = await engine.price_order(VENUE_V, lines)

    assert [(line.menu_item_id, line.quantity) for line in result.lines] == [
        (12, 1),
        (10, 2),
        (12, 4),
    ]
    assert result.total_in_cents == 199 + 1000 + 796


async def test_items_resolved_in_one_lookup(engine, catalog):
    lines = [OrderLineRequest(10, 1), OrderLineRequest(11, 1), OrderLineRequest(10, 2)]

    await engine.price_order(VENUE_V, lines)

    assert catalog.batch_lookups == 1


async def test_uses_current_catalog_price(engine, catalog):
    catalog.set_price(10, 650)

    result = await engine.price_order(VENUE_V, [OrderLineRequest(10, 2)])

    assert result.total_in_cents == 1300


async def test_item_from_other_venue_rejects_whole_cart(engine):
    lines = [OrderLineRequest(10, 1), OrderLineRequest(20, 1)]

    with pytest.raises(ItemNotAvailable) as exc_info:
        await engine.price_order(VENUE_V, lines)

    assert "20" in exc_info.value.message


async def test_unknown_items_are_listed(engine):
    with pytest.raises(ItemNotAvailable) as exc_info:
        await engine.price_order(VENUE_V, [OrderLineRequest(99, 1), OrderLineRequest(98, 1)])

    assert "98, 99" in exc_info.value.message


async def test_empty_cart(engine, catalog):
    with pytest.raises(InvalidRequest):
        await engine.price_order(VENUE_V, [])

    assert catalog.batch_lookups == 0


@pytest.mark.parametrize("quantity", [0, -1, None, True])
async def test_bad_quantity_names_the_line(engine, quantity):
    lines = [OrderLineRequest(10, 1), OrderLineRequest(11, quantity)]

    with pytest.raises(InvalidRequest) as exc_info:
        await engine.price_order(VENUE_V, lines)

    assert exc_info.value.message.startswith("Line 2")


async def test_unknown_venue(engine):
    with pytest.raises(VenueNotFound):
        await engine.price_order(404, [OrderLineRequest(10, 1)])


async def test_cart_shape_checked_before_venue(engine):
    with pytest.raises(InvalidRequest):
        await engine.price_order(404, [OrderLineRequest(10, 0)])


async def test_quantity_beyond_column_range(engine):
    with pytest.raises(InvalidRequest) as exc_info:
        await engine.price_order(VENUE_V, [OrderLineRequest(10, INTEGER_MAX + 1)])

    assert exc_info.value.message.startswith("Line 1")


async def test_total_beyond_money_column_range():
    catalog = InMemoryCatalogGateway(
        venues=[VenueRef(id=VENUE_V, owner_merchant_id=100, name="V")],
        items=[MenuItemRef(id=10, venue_id=VENUE_V, price_in_cents=BIGINT_MAX, name="Caviar")],
    )
    engine = OrderPricingEngine(catalog)

    assert (await engine.price_order(VENUE_V, [OrderLineRequest(10, 1)])).total_in_cents == BIGINT_MAX
    with pytest.raises(InvalidRequest) as exc_info:
        await engine.price_order(VENUE_V, [OrderLineRequest(10, 2)])

    assert "maximum" in exc_info.value.message

"""Order endpoints over HTTP, including the error envelope."""

import pytest

from foodorder.models import Order


def _order_body(venue_id, *lines):
    return {
        "venue_id": venue_id,
        "items": [{"menu_item_id": item_id, "quantity": qty} for item_id, qty in lines],
    }


async def _place(client, auth, seeded, *lines):
    response = await client.post(
        "/diner/orders",
        json=_order_body(seeded.venue_id, *lines),
        headers=auth(seeded.diner),
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_place_order(client, auth, seeded):
    order = await _place(client, auth, seeded, (seeded.burger_id, 3), (seeded.fries_id, 1))

    assert order["status"] == "Pending"
    assert order["total_amount_in_cents"] == 1750
    assert order["venue"]["name"] == "Burger Barn"
    assert order["diner"]["email"] == "diner@example.com"
    assert [i["price_in_cents_at_order"] for i in order["items"]] == [500, 250]


async def test_client_prices_are_ignored(client, auth, seeded):
    body = _order_body(seeded.venue_id, (seeded.burger_id, 2))
    body["items"][0]["price_in_cents"] = 1
    body["total_amount_in_cents"] = 1

    response = await client.post("/diner/orders", json=body, headers=auth(seeded.diner))

    assert response.status_code == 201
    assert response.json()["total_amount_in_cents"] == 1000


async def test_missing_token(client, seeded):
    response = await client.post(
        "/diner/orders", json=_order_body(seeded.venue_id, (seeded.burger_id, 1))
    )

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "Unauthenticated",
        "detail": "Authorization header is missing or does not use the Bearer scheme",
    }
    assert response.headers["www-authenticate"] == "Bearer"


async def test_invalid_token(client, seeded):
    response = await client.get("/diner/orders", headers={"Authorization": "Bearer junk"})

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthenticated"


async def test_merchant_cannot_place_order(client, auth, seeded, count_rows):
    response = await client.post(
        "/diner/orders",
        json=_order_body(seeded.venue_id, (seeded.burger_id, 1)),
        headers=auth(seeded.merchant),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"
    assert await count_rows(Order) == 0


@pytest.mark.parametrize("quantities", [[], [0], [-3], [None], [1, 0]])
async def test_rejected_carts(client, auth, seeded, count_rows, quantities):
    lines = [(seeded.burger_id, qty) for qty in quantities]

    response = await client.post(
        "/diner/orders",
        json=_order_body(seeded.venue_id, *lines),
        headers=auth(seeded.diner),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequest"
    assert await count_rows(Order) == 0


async def test_item_from_other_venue(client, auth, seeded, count_rows):
    response = await client.post(
        "/diner/orders",
        json=_order_body(seeded.venue_id, (seeded.burger_id, 1), (seeded.salad_id, 1)),
        headers=auth(seeded.diner),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "ItemNotAvailable"
    assert str(seeded.salad_id) in response.json()["detail"]
    assert await count_rows(Order) == 0


async def test_unknown_venue(client, auth, seeded):
    response = await client.post(
        "/diner/orders",
        json=_order_body(999, (seeded.burger_id, 1)),
        headers=auth(seeded.diner),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "VenueNotFound"


async def test_malformed_body(client, auth, seeded):
    response = await client.post(
        "/diner/orders",
        json={"items": [{"menu_item_id": "abc", "quantity": 1}]},
        headers=auth(seeded.diner),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "InvalidRequest"
    assert "venue_id" in body["detail"]


async def test_diner_reads(client, auth, seeded):
    mine = await _place(client, auth, seeded, (seeded.burger_id, 1))
    response = await client.post(
        "/diner/orders",
        json=_order_body(seeded.venue_id, (seeded.fries_id, 1)),
        headers=auth(seeded.other_diner),
    )
    theirs = response.json()

    listed = await client.get("/diner/orders", headers=auth(seeded.diner))
    own = await client.get(f"/diner/orders/{mine['id']}", headers=auth(seeded.diner))
    foreign = await client.get(f"/diner/orders/{theirs['id']}", headers=auth(seeded.diner))
    missing = await client.get("/diner/orders/999", headers=auth(seeded.diner))

    assert [o["id"] for o in listed.json()] == [mine["id"]]
    assert own.json()["id"] == mine["id"]
    assert foreign.status_code == 403
    assert missing.status_code == 404


async def test_diner_list_invalid_status_filter(client, auth, seeded):
    response = await client.get("/diner/orders?status=Lost", headers=auth(seeded.diner))

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidStatus"


async def test_status_update_by_owner(client, auth, seeded):
    order = await _place(client, auth, seeded, (seeded.burger_id, 1))

    response = await client.put(
        f"/merchant/orders/{order['id']}/status",
        json={"status": "Accepted"},
        headers=auth(seeded.merchant),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Accepted"


@pytest.mark.parametrize(
    "who,status,code,error",
    [
        ("other_merchant", "Accepted", 403, "Forbidden"),
        ("diner", "Cancelled", 403, "Forbidden"),
        ("merchant", "Done", 400, "InvalidStatus"),
        ("merchant", "Completed", 409, "InvalidTransition"),
    ],
)
async def test_status_update_rejections(client, auth, seeded, who, status, code, error):
    order = await _place(client, auth, seeded, (seeded.burger_id, 1))

    response = await client.put(
        f"/merchant/orders/{order['id']}/status",
        json={"status": status},
        headers=auth(getattr(seeded, who)),
    )
    stored = await client.get(f"/diner/orders/{order['id']}", headers=auth(seeded.diner))

    assert response.status_code == code
    assert response.json()["error"] == error
    assert stored.json()["status"] == "Pending"


async def test_status_update_unknown_order(client, auth, seeded):
    response = await client.put(
        "/merchant/orders/999/status",
        json={"status": "Accepted"},
        headers=auth(seeded.merchant),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


async def test_venue_orders(client, auth, seeded):
    first = await _place(client, auth, seeded, (seeded.burger_id, 1))
    second = await _place(client, auth, seeded, (seeded.fries_id, 2))
    await client.put(
        f"/merchant/orders/{first['id']}/status",
        json={"status": "Rejected"},
        headers=auth(seeded.merchant),
    )

    url = f"/merchant/venues/{seeded.venue_id}/orders"
    everything = await client.get(url, headers=auth(seeded.merchant))
    rejected = await client.get(f"{url}?status=Rejected", headers=auth(seeded.merchant))
    foreign = await client.get(url, headers=auth(seeded.other_merchant))

    assert [o["id"] for o in everything.json()] == [second["id"], first["id"]]
    assert [o["id"] for o in rejected.json()] == [first["id"]]
    assert foreign.status_code == 403


@pytest.mark.parametrize(
    "field, value",
    [("venue_id", 2**63), ("menu_item_id", 2**63), ("quantity", 2**62), ("quantity", 2**31)],
)
async def test_oversized_numbers_are_rejected(client, auth, seeded, count_rows, field, value):
    body = _order_body(seeded.venue_id, (seeded.burger_id, 1))
    if field == "venue_id":
        body["venue_id"] = value
    else:
        body["items"][0][field] = value

    response = await client.post("/diner/orders", json=body, headers=auth(seeded.diner))

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequest"
    assert await count_rows(Order) == 0


@pytest.mark.parametrize(
    "method, path, who",
    [
        ("get", f"/diner/orders/{2**63}", "diner"),
        ("get", f"/merchant/venues/{2**63}/orders", "merchant"),
        ("put", f"/merchant/orders/{2**63}/status", "merchant"),
        ("get", f"/public/venues/{2**63}", None),
    ],
)
async def test_oversized_path_ids_are_rejected(client, auth, seeded, method, path, who):
    headers = auth(getattr(seeded, who)) if who else {}
    kwargs = {"json": {"status": "Accepted"}} if method == "put" else {}

    response = await getattr(client, method)(path, headers=headers, **kwargs)

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequest"


async def test_diner_listing_venue_orders_is_forbidden(client, auth, seeded):
    response = await client.get("/merchant/venues/999/orders", headers=auth(seeded.diner))

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"

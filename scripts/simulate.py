"""
Chaos Simulation Script

Simulates high-concurrency order flow against a running server to check
that totals stay exact and that concurrent status changes never both win.
Run from project root: python scripts/simulate.py

Flow:
    1. Register a merchant, create a venue and a menu
    2. Register a handful of diners
    3. Fire orders concurrently (a share of them deliberately invalid)
    4. Race several merchants' requests on the same order's status
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from collections import Counter
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8080"
TOTAL_ORDERS = 50
TOTAL_DINERS = 5
PASSWORD = "chaos-pass-123"

MENU_ITEMS = [
    {"name": "Pizza Margherita", "price_in_cents": 1499, "category": "pizza"},
    {"name": "Pepperoni Pizza", "price_in_cents": 1699, "category": "pizza"},
    {"name": "Caesar Salad", "price_in_cents": 899, "category": "salad"},
    {"name": "Garlic Bread", "price_in_cents": 599, "category": "sides"},
    {"name": "Pasta Carbonara", "price_in_cents": 1399, "category": "pasta"},
    {"name": "Tiramisu", "price_in_cents": 799, "category": "dessert"},
    {"name": "Coke", "price_in_cents": 299, "category": "drinks"},
]


# =============================================================================
# SETUP
# =============================================================================

async def register_and_login(
    client: httpx.AsyncClient,
    user_type: str,
) -> dict[str, str]:
    """Create a throwaway account and return its Authorization header."""
    email = f"{user_type}-{uuid.uuid4().hex[:10]}@chaos.test"
    response = await client.post(
        f"{API_BASE_URL}/auth/register",
        json={"email": email, "password": PASSWORD, "user_type": user_type},
    )
    response.raise_for_status()

    response = await client.post(
        f"{API_BASE_URL}/auth/login",
        json={"email": email, "password": PASSWORD},
    )
    response.raise_for_status()
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def setup_venue(client: httpx.AsyncClient) -> dict[str, Any]:
    """Register a merchant with one venue and the sample menu."""
    merchant = await register_and_login(client, "merchant")

    response = await client.post(
        f"{API_BASE_URL}/merchant/venues",
        json={
            "name": f"Chaos Kitchen {random.randint(100, 999)}",
            "address": "350 Fifth Avenue",
            "description": "Load test venue",
            "cuisine_type": "italian",
        },
        headers=merchant,
    )
    response.raise_for_status()
    venue_id = response.json()["venue"]["id"]

    menu = {}
    for item in MENU_ITEMS:
        response = await client.post(
            f"{API_BASE_URL}/merchant/venues/{venue_id}/menuitems",
            json={**item, "description": item["name"]},
            headers=merchant,
        )
        response.raise_for_status()
        data = response.json()
        menu[data["id"]] = data["price_in_cents"]

    return {"merchant": merchant, "venue_id": venue_id, "menu": menu}


# =============================================================================
# ORDER SIMULATION
# =============================================================================

def generate_cart(menu: dict[int, int], invalid: bool) -> tuple[list[dict], int]:
    """Random cart and the total the server is expected to charge."""
    lines = [
        {"menu_item_id": random.choice(list(menu)), "quantity": random.randint(1, 3)}
        for _ in range(random.randint(1, 4))
    ]
    if invalid:
        lines[-1]["quantity"] = random.choice([0, -1])
        return lines, 0

    expected = sum(menu[line["menu_item_id"]] * line["quantity"] for line in lines)
    return lines, expected


async def send_order(
    client: httpx.AsyncClient,
    order_num: int,
    diner: dict[str, str],
    venue: dict[str, Any],
    invalid: bool,
) -> dict[str, Any]:
    """Place one order and check the server's total."""
    lines, expected = generate_cart(venue["menu"], invalid)
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/diner/orders",
            json={"venue_id": venue["venue_id"], "items": lines},
            headers=diner,
            timeout=30.0,
        )
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "expected_failure": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }

    elapsed = round(time.time() - start_time, 3)
    if response.status_code == 201:
        data = response.json()
        return {
            "order_num": order_num,
            "success": True,
            "order_id": data["id"],
            "total": data["total_amount_in_cents"],
            "total_ok": data["total_amount_in_cents"] == expected,
            "time": elapsed,
        }

    return {
        "order_num": order_num,
        "success": False,
        "expected_failure": invalid and response.status_code == 400,
        "error": response.text[:100],
        "time": elapsed,
    }


async def race_status_updates(
    client: httpx.AsyncClient,
    venue: dict[str, Any],
    order_id: int,
    racers: int = 5,
) -> Counter:
    """Send competing status changes for one Pending order at the same time."""
    targets = ["Accepted", "Rejected", "Cancelled"]
    requests = [
        client.put(
            f"{API_BASE_URL}/merchant/orders/{order_id}/status",
            json={"status": random.choice(targets)},
            headers=venue["merchant"],
            timeout=30.0,
        )
        for _ in range(racers)
    ]
    responses = await asyncio.gather(*requests)
    return Counter(
        "won" if r.status_code == 200 else r.json().get("error", str(r.status_code))
        for r in responses
    )


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    num_orders: int = TOTAL_ORDERS,
    invalid_ratio: float = 0.2,
    races: int = 5,
) -> dict[str, Any]:
    """
    Run the chaos simulation.

    Args:
        num_orders: Number of orders to fire concurrently
        invalid_ratio: Share of carts sent with a bad quantity
        races: Number of orders whose status is raced afterwards
    """
    print("=" * 70)
    print("🔥 CHAOS SIMULATION - HIGH CONCURRENCY TEST")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        venue = await setup_venue(client)
        diners = [await register_and_login(client, "diner") for _ in range(TOTAL_DINERS)]
        print(f"\n🏪 Venue #{venue['venue_id']} with {len(venue['menu'])} menu items")
        print(f"👥 {len(diners)} diners registered")

        print("\n🚀 Firing orders...\n")
        start_time = time.time()
        tasks = [
            send_order(
                client,
                i + 1,
                random.choice(diners),
                venue,
                invalid=random.random() < invalid_ratio,
            )
            for i in range(num_orders)
        ]
        results = await asyncio.gather(*tasks)
        total_time = round(time.time() - start_time, 2)

        successful = [r for r in results if r["success"]]
        race_results = []
        for result in successful[:races]:
            race_results.append(await race_status_updates(client, venue, result["order_id"]))

    failed = [r for r in results if not r["success"]]
    unexpected = [r for r in failed if not r.get("expected_failure")]
    wrong_totals = [r for r in successful if not r["total_ok"]]

    # Print results
    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"🚫 Rejected (invalid carts): {len(failed) - len(unexpected)}")
    print(f"❌ Unexpected Failures: {len(unexpected)}")
    print(f"🧮 Wrong Totals: {len(wrong_totals)}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r["total"] for r in successful)

        print("\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: ${total_revenue / 100:.2f}")

    if race_results:
        print("\n🏁 Status Races:")
        for counts in race_results:
            verdict = "✅" if counts["won"] == 1 else "❌"
            print(f"   {verdict} {dict(counts)}")

    if unexpected:
        print("\n⚠️  Unexpected Failure Details (showing first 5):")
        for f in unexpected[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "unexpected_failures": len(unexpected),
        "wrong_totals": len(wrong_totals),
        "races_with_single_winner": sum(1 for c in race_results if c["won"] == 1),
        "total_time": total_time,
    }


async def check_health() -> bool:
    """Pre-flight check before the simulation."""
    async with httpx.AsyncClient() as client:
        print("\n1️⃣ Health Check...")
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"   ❌ Unreachable: {e}")
            return False

        data = response.json()
        print(f"   Status: {data.get('status')}")
        print(f"   Database: {data.get('database')}")
        return data.get("status") == "operational"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Chaos Simulation Script")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--invalid", type=float, default=0.2, help="Share of invalid carts")
    parser.add_argument("--races", type=int, default=5, help="Orders to race status on")
    parser.add_argument("--skip-tests", action="store_true", help="Skip the health check")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if not args.skip_tests and not asyncio.run(check_health()):
        print("\n❌ Pre-flight check failed. Is the server running?")
        sys.exit(1)

    summary = asyncio.run(run_simulation(args.orders, args.invalid, args.races))
    clean = (
        summary["unexpected_failures"] == 0
        and summary["wrong_totals"] == 0
        and summary["races_with_single_winner"] == min(args.races, summary["successful"])
    )
    sys.exit(0 if clean else 1)

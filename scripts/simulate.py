"""
Billing Simulation Script

Plays the delivery service and the guests against a running billing
service: many guests receive deliveries concurrently, ask for their
bill and pay it. Every bill total is checked against the service's
menu and every ledger is checked to be empty after payment.

Run from project root: python scripts/simulate.py
"""

import argparse
import asyncio
import itertools
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8083"
TOTAL_GUESTS = 20

delivery_ids = itertools.count(1)


def generate_random_deliveries(
    guest: int,
    menu: dict[str, list[dict]],
) -> list[dict[str, Any]]:
    """Deliveries for 1-3 orders; some orders arrive in several plates."""
    food_ids = [item["id"] for item in menu["food"]]
    drink_ids = [item["id"] for item in menu["drinks"]]

    deliveries = []
    for order in range(1, random.randint(1, 3) + 1):
        for _ in range(random.randint(1, 2)):
            deliveries.append({
                "guest": guest,
                "order": guest * 100 + order,
                "food": random.choices(food_ids, k=random.randint(0, 3)),
                "drinks": random.choices(drink_ids, k=random.randint(0, 2)),
                "deliveryId": next(delivery_ids),
            })
    return deliveries


def expected_total(deliveries: list[dict], menu: dict[str, list[dict]]) -> float:
    food_prices = {item["id"]: item["price"] for item in menu["food"]}
    drink_prices = {item["id"]: item["price"] for item in menu["drinks"]}
    total = 0.0
    for delivery in deliveries:
        total += sum(drink_prices[i] for i in delivery["drinks"])
        total += sum(food_prices[i] for i in delivery["food"])
    return total


async def simulate_guest(
    client: httpx.AsyncClient,
    guest: int,
    menu: dict[str, list[dict]],
) -> dict[str, Any]:
    """Deliver, bill, pay and verify for one guest."""
    deliveries = generate_random_deliveries(guest, menu)
    start_time = time.time()

    try:
        for delivery in deliveries:
            response = await client.post(f"{API_BASE_URL}/deliveries", json=delivery)
            response.raise_for_status()

        response = await client.post(f"{API_BASE_URL}/bills/guest/{guest}")
        response.raise_for_status()
        bill = response.json()

        expected = expected_total(deliveries, menu)
        if abs(bill["totalSum"] - expected) > 1e-6:
            raise AssertionError(f"total {bill['totalSum']} != expected {expected}")

        options = await client.get(
            f"{API_BASE_URL}/payment-options",
            params={"amount": bill["totalSum"]},
        )
        options.raise_for_status()

        response = await client.post(
            f"{API_BASE_URL}/payments", json={"bill": bill["bill"]}
        )
        response.raise_for_status()
        receipt = response.json()

        ledger = await client.get(f"{API_BASE_URL}/ledger/{guest}")
        ledger.raise_for_status()
        if ledger.json()["orders"]:
            raise AssertionError(f"ledger not empty after payment: {ledger.json()}")

        return {
            "guest": guest,
            "success": True,
            "bill": receipt["bill"],
            "total": receipt["totalSum"],
            "methods": options.json(),
            "time": round(time.time() - start_time, 3),
        }

    except (httpx.HTTPError, AssertionError, KeyError) as e:
        return {
            "guest": guest,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


async def wait_for_menu(client: httpx.AsyncClient, timeout: float = 120.0) -> dict:
    """Poll GET /menu until the service has loaded its price list."""
    deadline = time.time() + timeout
    while True:
        response = await client.get(f"{API_BASE_URL}/menu")
        if response.status_code == 200:
            return response.json()
        if time.time() > deadline:
            raise TimeoutError("Menu did not load in time")
        print("   ... menu not ready yet, waiting")
        await asyncio.sleep(2)


async def run_simulation(num_guests: int = TOTAL_GUESTS) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        num_guests: Number of guests served concurrently
    """
    print("=" * 70)
    print("BILLING SIMULATION")
    print("=" * 70)
    print(f"Guests: {num_guests}")
    print(f"Target: {API_BASE_URL}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=30.0) as client:
        health = await client.get(f"{API_BASE_URL}/health")
        health.raise_for_status()
        print(f"\nHealth: {health.json()['status']} (menu source: {health.json()['menuSource']})")

        menu = await wait_for_menu(client)
        print(f"Menu: {len(menu['food'])} food, {len(menu['drinks'])} drinks\n")

        tasks = [simulate_guest(client, guest, menu) for guest in range(1, num_guests + 1)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("=" * 70)
    print("SIMULATION RESULTS")
    print("=" * 70)
    print(f"\nSettled guests: {len(successful)}/{num_guests}")
    print(f"Failed guests: {len(failed)}/{num_guests}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r["total"] for r in successful)
        card_bills = len([r for r in successful if "CreditCard" in r["methods"]])
        print(f"\nAverage guest flow: {avg_time}s")
        print(f"Revenue: {revenue:.2f}")
        print(f"Bills eligible for card payment: {card_bills}")

    if failed:
        print("\nFailed guest details (showing first 5):")
        for f in failed[:5]:
            print(f"   Guest {f['guest']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)

    return {
        "total": num_guests,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Billing Simulation Script")
    parser.add_argument("--guests", type=int, default=TOTAL_GUESTS, help="Number of guests")
    parser.add_argument("--url", default=API_BASE_URL, help="Billing service base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    summary = asyncio.run(run_simulation(args.guests))
    sys.exit(1 if summary["failed"] else 0)

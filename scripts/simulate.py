"""
Order Flow Simulation Script

Drives many concurrent customers through the full flow against a running
server: create a cart, add random catalog items, place an order and
(optionally) poll it until it is delivered.

Run from project root (server started with `python -m food_ordering.main`):
    python scripts/simulate.py --customers 20 --wait

Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any, Optional

import httpx

# Configuration
API_BASE_URL = "http://localhost:3001"
TOTAL_CUSTOMERS = 20
TERMINAL_STATUS = "delivered"


# =============================================================================
# PAYLOAD GENERATION
# =============================================================================

def generate_line_requests(menu: dict[str, Any], rng: Optional[random.Random] = None) -> list[dict]:
    """
    Pick 1-3 random items from a menu, each with a random quantity and
    a random subset of its options.
    """
    rng = rng or random.Random()
    items = menu.get("items", [])
    lines = []
    for _ in range(rng.randint(1, 3)):
        item = rng.choice(items)
        options = []
        for group in item.get("optionGroups", []):
            count = rng.randint(group.get("min", 0), min(group["max"], len(group["options"])))
            options.extend(
                {"id": o["id"], "name": o["name"], "price": o["price"]}
                for o in rng.sample(group["options"], count)
            )
        lines.append({
            "itemId": item["id"],
            "qty": rng.randint(1, 3),
            "options": options,
        })
    return lines


# =============================================================================
# CUSTOMER FLOW
# =============================================================================

async def wait_for_delivery(
    client: httpx.AsyncClient,
    order_id: str,
    poll_interval: float = 0.5,
    timeout: float = 30.0,
) -> Optional[dict[str, Any]]:
    """Poll an order until it reaches the terminal status or time runs out."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        response = await client.get(f"/orders/{order_id}")
        response.raise_for_status()
        order = response.json()
        if order["status"] == TERMINAL_STATUS:
            return order
        await asyncio.sleep(poll_interval)
    return None


async def run_customer(
    client: httpx.AsyncClient,
    customer_num: int,
    wait: bool = False,
    rng: Optional[random.Random] = None,
) -> dict[str, Any]:
    """Walk one customer through cart → order (→ delivered)."""
    start_time = time.time()

    try:
        outlets = (await client.get("/outlets")).json()
        outlet = (rng or random).choice(outlets)
        menu_id = outlet["menus"][0]["id"]
        menu = (await client.get(f"/menus/{menu_id}")).json()

        response = await client.post("/carts")
        response.raise_for_status()
        cart = response.json()

        for line in generate_line_requests(menu, rng):
            response = await client.post(f"/carts/{cart['id']}/items", json=line)
            response.raise_for_status()
            cart = response.json()

        response = await client.post("/orders", json={
            "cartId": cart["id"],
            "outletId": outlet["id"],
            "fulfillment": {"type": "delivery"},
            "payment": {"method": "dummy"},
        })
        response.raise_for_status()
        order = response.json()

        delivered = None
        if wait:
            delivered = await wait_for_delivery(client, order["id"])

        return {
            "customer_num": customer_num,
            "success": not wait or delivered is not None,
            "order_id": order["id"],
            "total": order["amount"]["total"],
            "status": (delivered or order)["status"],
            "time": round(time.time() - start_time, 3),
        }
    except httpx.HTTPError as e:
        return {
            "customer_num": customer_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    base_url: str = API_BASE_URL,
    num_customers: int = TOTAL_CUSTOMERS,
    wait: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    seed: Optional[int] = None,
) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        base_url: Server base URL
        num_customers: Number of concurrent customers
        wait: Poll every order until delivered
        transport: Optional transport (e.g. ASGITransport for in-process runs)
        seed: Make the generated carts reproducible; customer i draws from
            its own generator seeded with seed + i
    """
    print("=" * 70)
    print("ORDER FLOW SIMULATION")
    print("=" * 70)
    print(f"Customers: {num_customers}")
    print(f"Target: {base_url}")
    print(f"Wait for delivery: {wait}")
    if seed is not None:
        print(f"Seed: {seed}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with httpx.AsyncClient(base_url=base_url, transport=transport, timeout=30.0) as client:
        tasks = [
            run_customer(
                client,
                i + 1,
                wait=wait,
                rng=random.Random(seed + i) if seed is not None else None,
            )
            for i in range(num_customers)
        ]
        results = await asyncio.gather(*tasks)
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\nSuccessful: {len(successful)}/{num_customers}")
    print(f"Failed: {len(failed)}/{num_customers}")
    print(f"Total Time: {total_time}s")

    if successful:
        revenue = sum(r["total"] for r in successful)
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"Average Flow Time: {avg_time}s")
        print(f"Total Revenue: ${revenue:.2f}")

    if failed:
        print("\nFailed customers (first 5):")
        for f in failed[:5]:
            print(f"   #{f['customer_num']}: {f.get('error', 'not delivered in time')}")

    print("=" * 70)

    return {
        "total": num_customers,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Flow Simulation Script")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--customers", type=int, default=TOTAL_CUSTOMERS, help="Number of customers")
    parser.add_argument("--wait", action="store_true", help="Poll orders until delivered")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible carts")
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(args.base_url, args.customers, args.wait, seed=args.seed))
    sys.exit(0 if summary["failed"] == 0 else 1)

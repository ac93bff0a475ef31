#!/usr/bin/env python
"""List recent Pour the PORT orders via the Shopify Admin API."""
from __future__ import annotations

import argparse
import asyncio

from portsite.services.shopify_admin import admin_client, format_order_summary


async def _run(limit: int, show_all: bool) -> None:
    try:
        if show_all:
            orders = await admin_client.get_recent_orders(limit)
        else:
            orders = await admin_client.get_product_orders(limit=limit)
        if not orders:
            print("No orders found.")
        for order in orders:
            print(format_order_summary(order))
    finally:
        await admin_client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="List recent Shopify orders")
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument("--all", action="store_true", help="include orders without the product")
    args = parser.parse_args()

    asyncio.run(_run(args.limit, args.all))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Fetch distributors and campaign orders from the partner API.

Reads PARTNER_API_URL / PARTNER_CLIENT_ID / PARTNER_CLIENT_SECRET from
.env.local (or the environment) and prints a summary plus the official-sale
candidates built from paid orders. Nothing is written to the store.

Usage:
    python scripts/sync_partner.py [--json]
"""

import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
load_dotenv(project_root / ".env.local")

from sprint_lab.sync import SyncOrchestrator, orders_to_official_sales


async def main(as_json: bool) -> int:
    result = await SyncOrchestrator().sync()
    if not result.success:
        print(f"[ERROR] {result.message}", file=sys.stderr)
        return 1

    orders = next((p["data"] for p in result.payloads if p["source"] == "pedidos"), [])
    candidates = orders_to_official_sales(orders)

    if as_json:
        print(json.dumps({
            "payloads": result.payloads,
            "official_sales": [asdict(sale) for sale in candidates],
        }, ensure_ascii=False, indent=2))
        return 0

    print(f"[SUCCESS] {result.message}")
    for payload in result.payloads:
        print(f"  {payload['source']}: {len(payload['data'])} records (fetched {payload['fetched_at']})")
    print(f"  official sale candidates: {len(candidates)} ({sum(s.quantity for s in candidates)} pairs)")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main("--json" in sys.argv[1:])))

"""
Partner data sync.

Fetches distributors and campaign orders from the partner API and returns
them as timestamped payloads. Turning paid orders into official sales is
available through orders_to_official_sales(); persisting them is left to
the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..campaign import CAMPAIGN_START_FILTER
from ..models import OfficialSale
from .partner import STATUS_PAID, PartnerApiClient

logger = logging.getLogger(__name__)

_PARTNER_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class SyncResult:
    success: bool
    message: str
    payloads: List[Dict[str, Any]] = field(default_factory=list)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class SyncOrchestrator:
    """Runs one sync pass against the partner API"""

    def __init__(self, client: Optional[PartnerApiClient] = None, start_date: str = CAMPAIGN_START_FILTER):
        self.client = client or PartnerApiClient()
        self.start_date = start_date

    async def sync(self) -> SyncResult:
        token_result = await self.client.get_token()
        if not token_result.success or not token_result.data:
            logger.error(f"Partner sync aborted: {token_result.error}")
            return SyncResult(success=False, message=f"Failed to get external API token: {token_result.error}")

        token = token_result.data
        distributors = await self.client.get_distributors(token)
        orders = await self.client.get_orders(token, self.start_date)

        payloads = []
        if distributors.success:
            payloads.append({"source": "distribuidores", "data": distributors.data, "fetched_at": _utc_now_iso()})
        else:
            logger.warning(f"Distributors not fetched: {distributors.error}")

        if orders.success:
            payloads.append({"source": "pedidos", "data": orders.data, "fetched_at": _utc_now_iso()})
        else:
            logger.warning(f"Orders not fetched: {orders.error}")

        if not payloads:
            return SyncResult(success=True, message="No external data fetched")

        logger.info(f"Partner sync fetched {len(payloads)} payloads")
        return SyncResult(success=True, message=f"Fetched {len(payloads)} payloads", payloads=payloads)


def _order_date(added_at: Any) -> Tuple[str, int]:
    """(dd/mm/yyyy, epoch millis) from a partner timestamp, or ("", 0)"""
    if not isinstance(added_at, str):
        return "", 0
    try:
        parsed = datetime.strptime(added_at.strip(), _PARTNER_DATE_FORMAT)
    except ValueError:
        return "", 0
    return parsed.strftime("%d/%m/%Y"), int(parsed.replace(tzinfo=timezone.utc).timestamp() * 1000)


def orders_to_official_sales(orders: Iterable[Dict[str, Any]]) -> List[OfficialSale]:
    """
    Paid orders with a sponsoring distributor, as official sales.

    Quantity is the sum of item quantities; orders summing to zero are skipped.
    """
    sales = []
    for order in orders:
        if not isinstance(order, dict) or order.get("status") != STATUS_PAID:
            continue
        sponsor = order.get("sponsor")
        if sponsor in (None, ""):
            continue

        quantity = sum(item.get("quantity", 0) for item in order.get("items", []))
        if quantity <= 0:
            continue

        date, timestamp = _order_date(order.get("added_at"))
        sales.append(OfficialSale(
            id=f"order-{order.get('id')}",
            distributor_id=str(sponsor),
            quantity=quantity,
            date=date,
            timestamp=timestamp,
        ))
    return sales

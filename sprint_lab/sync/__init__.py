"""
Partner API integration (distributors and campaign orders).
"""

from .partner import PartnerApiClient, normalize_order
from .orchestrator import SyncOrchestrator, SyncResult, orders_to_official_sales

__all__ = [
    "PartnerApiClient",
    "normalize_order",
    "SyncOrchestrator",
    "SyncResult",
    "orders_to_official_sales",
]

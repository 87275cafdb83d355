"""
Fallback chain of data stores.

Stores are tried in order (typically PostgreSQL, then the local store). A
store raising StoreUnavailableError is skipped; the first store that answers
wins. Any other StoreError propagates unchanged: the store was reachable and
rejected the operation, so trying the next one would only hide the problem.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models import DailyLog, OfficialSale, User
from .base import DataStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class FallbackStore(DataStore):
    """Ordered list of stores tried in sequence"""

    name = "fallback"

    def __init__(self, stores: Sequence[DataStore]):
        if not stores:
            raise ValueError("FallbackStore requires at least one store")
        self.stores: List[DataStore] = list(stores)

    async def _first_available(self, operation: str, *args):
        errors = []
        for store in self.stores:
            try:
                return await getattr(store, operation)(*args)
            except StoreUnavailableError as e:
                logger.warning(f"Store '{store.name}' unavailable for {operation}: {e}")
                errors.append(f"{store.name}: {e}")

        raise StoreUnavailableError(f"All stores unavailable for {operation} ({'; '.join(errors)})")

    async def get_user_credentials(self, whatsapp: str) -> Optional[Tuple[User, str]]:
        return await self._first_available("get_user_credentials", whatsapp)

    async def create_user(self, name: str, whatsapp: str, password_hash: str, role: str) -> User:
        return await self._first_available("create_user", name, whatsapp, password_hash, role)

    async def list_users(self, role: Optional[str] = None) -> List[User]:
        return await self._first_available("list_users", role)

    async def list_logs(self, user_id: Optional[str] = None) -> List[DailyLog]:
        return await self._first_available("list_logs", user_id)

    async def insert_log(self, log: DailyLog) -> DailyLog:
        return await self._first_available("insert_log", log)

    async def list_official_sales(self) -> List[OfficialSale]:
        return await self._first_available("list_official_sales")

    async def insert_official_sale(
        self,
        distributor_id: str,
        quantity: int,
        date: str,
        timestamp: int,
    ) -> OfficialSale:
        return await self._first_available("insert_official_sale", distributor_id, quantity, date, timestamp)

    async def close(self):
        for store in self.stores:
            await store.close()

"""
Abstract base class for data stores.

All stores must implement this interface to be swappable (and chainable,
see FallbackStore). Stores return canonical records from models.py.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..models import DailyLog, OfficialSale, User


class StoreError(Exception):
    """Store rejected or failed an operation"""


class StoreUnavailableError(StoreError):
    """Store cannot be reached (not configured, connection lost, ...)"""


class DataStore(ABC):
    """
    Abstract base class for data stores.

    Expected "not found" cases return None / empty lists; infrastructure
    problems raise StoreError or StoreUnavailableError.
    """

    name: str = "store"

    @abstractmethod
    async def get_user_credentials(self, whatsapp: str) -> Optional[Tuple[User, str]]:
        """
        Look up a user by WhatsApp number.

        Returns:
            (user, password_hash) or None if no user has this number
        """
        pass

    @abstractmethod
    async def create_user(self, name: str, whatsapp: str, password_hash: str, role: str) -> User:
        pass

    @abstractmethod
    async def list_users(self, role: Optional[str] = None) -> List[User]:
        pass

    @abstractmethod
    async def list_logs(self, user_id: Optional[str] = None) -> List[DailyLog]:
        """All daily logs, or only those of `user_id`, in submission order"""
        pass

    @abstractmethod
    async def insert_log(self, log: DailyLog) -> DailyLog:
        pass

    @abstractmethod
    async def list_official_sales(self) -> List[OfficialSale]:
        pass

    @abstractmethod
    async def insert_official_sale(
        self,
        distributor_id: str,
        quantity: int,
        date: str,
        timestamp: int,
    ) -> OfficialSale:
        pass

    async def close(self):
        """Optional cleanup (close pools, flush files, etc.)"""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

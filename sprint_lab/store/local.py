"""
Local (offline) store.

Keeps campaign data in memory, optionally mirrored to a JSON file so data
survives restarts. Rows are kept in camelCase, the shape the offline mode
has always used; they are normalized on the way out.

File layout:
{
    "users": [{"id": "local-...", "name": "...", "whatsapp": "...", "role": "distributor", "createdAt": "..."}],
    "credentials": {"<whatsapp>": "<password hash>"},
    "logs": [{"id": "...", "userId": "...", "pairsSold": 3, ...}],
    "sales": [{"id": "sale-...", "distributorId": "...", "quantity": 2, ...}]
}
"""

import asyncio
import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..models import (
    DailyLog,
    OfficialSale,
    User,
    as_list,
    log_to_camel,
    normalize_all,
    normalize_log,
    normalize_sale,
    normalize_user,
    sale_to_camel,
    user_to_camel,
)
from .base import DataStore, StoreError

logger = logging.getLogger(__name__)


class LocalStore(DataStore):
    """In-memory store with optional JSON file persistence"""

    name = "local"

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Args:
            path: JSON file to load from / save to (None = memory only)
        """
        self.path = Path(path) if path else None
        self._lock = asyncio.Lock()
        self._data: Optional[dict] = None

    def _load(self) -> dict:
        if self._data is not None:
            return self._data

        raw: dict = {}
        if self.path and self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StoreError(f"Failed to read local store {self.path}: {e}")
            if not isinstance(raw, dict):
                raw = {}

        credentials = raw.get("credentials")
        self._data = {
            "users": as_list(raw.get("users")),
            "credentials": credentials if isinstance(credentials, dict) else {},
            "logs": as_list(raw.get("logs")),
            "sales": as_list(raw.get("sales")),
        }
        logger.debug(
            f"Local store loaded: {len(self._data['users'])} users, "
            f"{len(self._data['logs'])} logs, {len(self._data['sales'])} sales"
        )
        return self._data

    def _save(self):
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise StoreError(f"Failed to write local store {self.path}: {e}")

    def _commit(self, collection: str):
        """Save after appending to `collection`; a failed write drops the appended row"""
        try:
            self._save()
        except StoreError:
            self._data[collection].pop()
            raise

    async def get_user_credentials(self, whatsapp: str) -> Optional[Tuple[User, str]]:
        data = self._load()
        password_hash = data["credentials"].get(whatsapp)
        if not password_hash:
            return None

        for user in normalize_all(data["users"], normalize_user):
            if user.whatsapp == whatsapp:
                return user, password_hash
        return None

    async def create_user(self, name: str, whatsapp: str, password_hash: str, role: str) -> User:
        async with self._lock:
            data = self._load()
            user = User(
                id=f"local-{uuid.uuid4().hex[:12]}",
                name=name,
                whatsapp=whatsapp,
                role=role,
                created_at=datetime.utcnow().isoformat() + "Z",
            )
            previous_hash = data["credentials"].get(whatsapp)
            data["users"].append(user_to_camel(user))
            data["credentials"][whatsapp] = password_hash
            try:
                self._save()
            except StoreError:
                data["users"].pop()
                if previous_hash is None:
                    del data["credentials"][whatsapp]
                else:
                    data["credentials"][whatsapp] = previous_hash
                raise
            return user

    async def list_users(self, role: Optional[str] = None) -> List[User]:
        users = normalize_all(self._load()["users"], normalize_user)
        if role:
            users = [u for u in users if u.role == role]
        return users

    async def list_logs(self, user_id: Optional[str] = None) -> List[DailyLog]:
        logs = normalize_all(self._load()["logs"], normalize_log)
        if user_id is not None:
            logs = [log for log in logs if log.user_id == user_id]
        return logs

    async def insert_log(self, log: DailyLog) -> DailyLog:
        async with self._lock:
            data = self._load()
            if not log.id:
                log = replace(log, id=f"log-{uuid.uuid4().hex[:12]}")
            data["logs"].append(log_to_camel(log))
            self._commit("logs")
            return log

    async def list_official_sales(self) -> List[OfficialSale]:
        return normalize_all(self._load()["sales"], normalize_sale)

    async def insert_official_sale(
        self,
        distributor_id: str,
        quantity: int,
        date: str,
        timestamp: int,
    ) -> OfficialSale:
        async with self._lock:
            data = self._load()
            sale = OfficialSale(
                id=f"sale-{uuid.uuid4().hex[:12]}",
                distributor_id=distributor_id,
                quantity=quantity,
                date=date,
                timestamp=timestamp,
            )
            data["sales"].append(sale_to_camel(sale))
            self._commit("sales")
            return sale

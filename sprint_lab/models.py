"""
Domain records and ingestion normalization.

Two upstream shapes reach the application:
- local store rows (camelCase: userId, pairsSold, distributorId, createdAt)
- PostgreSQL rows (snake_case: user_id, pairs_sold, distributor_id, created_at)

Every raw record is mapped to one canonical dataclass right after it is
fetched, so aggregation code never branches on field spelling.
"""

from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, Optional, TypeVar

ROLE_ADMIN = "admin"
ROLE_DISTRIBUTOR = "distributor"

LOG_TYPES = ("presential", "online", "mixed")

T = TypeVar("T")


@dataclass(frozen=True)
class User:
    id: str
    name: str
    whatsapp: str = ""
    role: str = ROLE_DISTRIBUTOR
    created_at: str = ""


@dataclass(frozen=True)
class DailyLog:
    """Self-reported activity (one record per submission, not per day)"""
    id: str
    user_id: str
    date: str
    pairs_sold: int = 0
    prospects_contacted: int = 0
    activations: int = 0
    type: str = "mixed"


@dataclass(frozen=True)
class OfficialSale:
    """Admin-confirmed sale (ground truth for ranking)"""
    id: str
    distributor_id: str
    quantity: int
    date: str = ""
    timestamp: int = 0


@dataclass(frozen=True)
class TeamMember:
    """Leaderboard row, recomputed on every request"""
    id: str
    name: str
    total_official_sales: int
    self_reported_sales: int
    score: int
    is_current_user: bool


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service call.

    Expected failures (validation, not found, upstream down) are reported
    here instead of being raised.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ServiceResult[T]":
        return cls(success=False, error=error)


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """First truthy value among alternative spellings"""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def to_number(value: Any) -> int:
    """Coerce a quantity-like value; anything unparsable counts as 0"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return 0
    return 0


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_user(raw: Any) -> Optional[User]:
    if isinstance(raw, User):
        return raw
    if not isinstance(raw, Mapping) or raw.get("id") is None:
        return None
    return User(
        id=_as_str(raw["id"]),
        name=_as_str(raw.get("name")),
        whatsapp=_as_str(raw.get("whatsapp")),
        role=_as_str(raw.get("role")),
        created_at=_as_str(_first(raw, "createdAt", "created_at")),
    )


def normalize_sale(raw: Any) -> Optional[OfficialSale]:
    if isinstance(raw, OfficialSale):
        return raw
    if not isinstance(raw, Mapping):
        return None
    return OfficialSale(
        id=_as_str(raw.get("id")),
        distributor_id=_as_str(_first(raw, "distributorId", "distributor_id")),
        quantity=to_number(raw.get("quantity")),
        date=_as_str(raw.get("date")),
        timestamp=to_number(raw.get("timestamp")),
    )


def normalize_log(raw: Any) -> Optional[DailyLog]:
    if isinstance(raw, DailyLog):
        return raw
    if not isinstance(raw, Mapping):
        return None
    return DailyLog(
        id=_as_str(raw.get("id")),
        user_id=_as_str(_first(raw, "userId", "user_id")),
        date=_as_str(raw.get("date")),
        pairs_sold=to_number(_first(raw, "pairs_sold", "pairsSold")),
        prospects_contacted=to_number(_first(raw, "prospects_contacted", "prospectsContacted")),
        activations=to_number(raw.get("activations")),
        type=_as_str(raw.get("type")) or "mixed",
    )


def as_list(value: Any) -> List[Any]:
    """Lists and tuples pass through; anything else is treated as empty"""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def normalize_all(raw_records: Any, normalizer) -> list:
    records = (normalizer(r) for r in as_list(raw_records))
    return [r for r in records if r is not None]


def user_to_camel(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "whatsapp": user.whatsapp,
        "role": user.role,
        "createdAt": user.created_at,
    }


def log_to_camel(log: DailyLog) -> dict:
    return {
        "id": log.id,
        "userId": log.user_id,
        "date": log.date,
        "pairsSold": log.pairs_sold,
        "prospectsContacted": log.prospects_contacted,
        "activations": log.activations,
        "type": log.type,
    }


def sale_to_camel(sale: OfficialSale) -> dict:
    return {
        "id": sale.id,
        "distributorId": sale.distributor_id,
        "quantity": sale.quantity,
        "date": sale.date,
        "timestamp": sale.timestamp,
    }

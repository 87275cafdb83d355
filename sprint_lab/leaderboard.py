"""
Leaderboard aggregation - joins users, official sales and self-reported logs.

Ranking key is the official (admin-confirmed) sales total. Self-reported
pairs are shown next to it but never affect the order.

Inputs are normalized at the boundary:
- a collection that is not a list/tuple is treated as empty
- sale/log records may use camelCase or snake_case field names
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from .models import (
    ROLE_DISTRIBUTOR,
    TeamMember,
    normalize_all,
    normalize_log,
    normalize_sale,
    normalize_user,
)

logger = logging.getLogger(__name__)


def compute_leaderboard(
    users: Any,
    official_sales: Any,
    daily_logs: Any,
    current_user_id: Optional[str] = None,
) -> List[TeamMember]:
    """
    Build the ranked team list.

    Args:
        users: User records (only role == "distributor" are ranked)
        official_sales: OfficialSale records (distributorId | distributor_id)
        daily_logs: DailyLog records (userId | user_id, pairsSold | pairs_sold)
        current_user_id: Caller's id, flags their row with is_current_user

    Returns:
        TeamMembers sorted by score (descending). Sort is stable: distributors
        with equal scores keep their order from `users`.

    Example:
        >>> board = compute_leaderboard(
        ...     [{"id": "u1", "name": "Ana", "role": "distributor"}],
        ...     [{"distributor_id": "u1", "quantity": 3}, {"distributorId": "u1", "quantity": 2}],
        ...     [{"userId": "u1", "pairsSold": 4}],
        ... )
        >>> board[0].total_official_sales, board[0].self_reported_sales
        (5, 4)
    """
    distributors = [
        u for u in normalize_all(users, normalize_user)
        if u.role == ROLE_DISTRIBUTOR
    ]
    sales = normalize_all(official_sales, normalize_sale)
    logs = normalize_all(daily_logs, normalize_log)

    official_totals: Dict[str, int] = defaultdict(int)
    for sale in sales:
        official_totals[sale.distributor_id] += sale.quantity

    reported_totals: Dict[str, int] = defaultdict(int)
    for log in logs:
        reported_totals[log.user_id] += log.pairs_sold

    members = [
        TeamMember(
            id=user.id,
            name=user.name,
            total_official_sales=official_totals.get(user.id, 0),
            self_reported_sales=reported_totals.get(user.id, 0),
            score=official_totals.get(user.id, 0),
            is_current_user=current_user_id is not None and user.id == current_user_id,
        )
        for user in distributors
    ]

    logger.debug(
        f"Leaderboard computed: {len(members)} distributors, "
        f"{len(sales)} official sales, {len(logs)} daily logs"
    )

    return sorted(members, key=lambda m: m.score, reverse=True)

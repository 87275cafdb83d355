"""Campaign constants, dashboard summary and profit calculator"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional

from .models import normalize_all, normalize_log

CAMPAIGN_START = datetime(2025, 12, 8, 0, 0, 0)
CAMPAIGN_END = datetime(2025, 12, 22, 23, 59, 59)

# Partner API filter format for orders added since campaign start
CAMPAIGN_START_FILTER = CAMPAIGN_START.strftime("%Y-%m-%d %H:%M:%S")

PROFIT_PER_PAIR = 244.50
DAILY_TARGET_PAIRS = 3
CHART_WINDOW = 7


@dataclass
class ChartPoint:
    name: str   # "dd/mm"
    sales: int


@dataclass
class DashboardSummary:
    total_pairs: int
    estimated_profit: float
    chart: List[ChartPoint] = field(default_factory=list)


@dataclass
class ProfitProjection:
    pairs_per_day: int
    profit_per_pair: float
    days_remaining: int
    total_potential: float


def _chart_label(log_date: str) -> str:
    # pt-BR dates: "08/12/2025" -> "08/12"
    parts = log_date.split("/")
    if len(parts) < 2:
        return ""
    return f"{parts[0]}/{parts[1]}"


def summarize_logs(daily_logs: Any) -> DashboardSummary:
    """
    Distributor dashboard figures from their self-reported logs.

    Estimated profit is total pairs × PROFIT_PER_PAIR; the chart holds the
    last CHART_WINDOW submissions in submission order.
    """
    logs = normalize_all(daily_logs, normalize_log)
    total_pairs = sum(log.pairs_sold for log in logs)

    chart = [
        ChartPoint(name=_chart_label(log.date), sales=log.pairs_sold)
        for log in logs[-CHART_WINDOW:]
    ]

    return DashboardSummary(
        total_pairs=total_pairs,
        estimated_profit=total_pairs * PROFIT_PER_PAIR,
        chart=chart,
    )


def days_remaining(today: Optional[date] = None) -> int:
    """Campaign days left (14 before the start, 0 once the campaign is over)"""
    today = today or date.today()
    start = CAMPAIGN_START.date()
    end = CAMPAIGN_END.date()

    if today > end:
        return 0
    first_day = max(today, start)
    return (end - first_day).days


def project_potential(
    pairs_per_day: int = DAILY_TARGET_PAIRS,
    profit_per_pair: float = PROFIT_PER_PAIR,
    remaining: Optional[int] = None,
) -> ProfitProjection:
    """
    Profit still reachable if the daily pace is held until the end.

    Example:
        >>> project_potential(3, 244.50, 14).total_potential
        10269.0
    """
    remaining = days_remaining() if remaining is None else max(remaining, 0)
    pairs_per_day = max(pairs_per_day, 0)

    return ProfitProjection(
        pairs_per_day=pairs_per_day,
        profit_per_pair=profit_per_pair,
        days_remaining=remaining,
        total_potential=round(pairs_per_day * profit_per_pair * remaining, 2),
    )

"""
Unit tests for campaign figures (dashboard summary, profit calculator)
and record normalization helpers.
"""

from datetime import date

import pytest

from sprint_lab.campaign import (
    CAMPAIGN_START_FILTER,
    PROFIT_PER_PAIR,
    days_remaining,
    project_potential,
    summarize_logs,
)
from sprint_lab.models import as_list, normalize_log, normalize_user, to_number

pytestmark = pytest.mark.unit


class TestProfitCalculator:

    def test_full_campaign_projection(self):
        projection = project_potential(3, 244.50, 14)
        assert projection.total_potential == 10269.0
        assert projection.days_remaining == 14

    def test_negative_inputs_clamped(self):
        projection = project_potential(-2, PROFIT_PER_PAIR, -5)
        assert projection.pairs_per_day == 0
        assert projection.days_remaining == 0
        assert projection.total_potential == 0

    @pytest.mark.parametrize("today,expected", [
        (date(2025, 12, 1), 14),
        (date(2025, 12, 8), 14),
        (date(2025, 12, 15), 7),
        (date(2025, 12, 22), 0),
        (date(2025, 12, 23), 0),
    ])
    def test_days_remaining(self, today, expected):
        assert days_remaining(today) == expected

    def test_partner_filter_format(self):
        assert CAMPAIGN_START_FILTER == "2025-12-08 00:00:00"


class TestDashboardSummary:

    def test_totals_and_chart_window(self):
        logs = [
            {"userId": "u1", "date": f"{day:02d}/12/2025", "pairsSold": day - 7}
            for day in range(8, 16)
        ]
        summary = summarize_logs(logs)
        assert summary.total_pairs == 36
        assert summary.estimated_profit == 36 * PROFIT_PER_PAIR
        assert len(summary.chart) == 7
        assert summary.chart[0].name == "09/12"
        assert summary.chart[0].sales == 2
        assert summary.chart[-1].sales == 8

    def test_no_logs(self):
        summary = summarize_logs(None)
        assert summary.total_pairs == 0
        assert summary.estimated_profit == 0
        assert summary.chart == []


class TestNormalization:

    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        (2.9, 2),
        ("4", 4),
        (" 5 ", 5),
        ("abc", 0),
        (None, 0),
        (True, 0),
        ([1], 0),
    ])
    def test_to_number(self, value, expected):
        assert to_number(value) == expected

    def test_normalize_log_accepts_both_spellings(self):
        camel = normalize_log({"id": "l1", "userId": "u1", "date": "08/12/2025", "pairsSold": 2, "prospectsContacted": 7})
        snake = normalize_log({"id": "l1", "user_id": "u1", "date": "08/12/2025", "pairs_sold": 2, "prospects_contacted": 7})
        assert camel == snake
        assert camel.type == "mixed"

    def test_normalize_user_requires_id(self):
        assert normalize_user({"name": "Sem id"}) is None
        assert normalize_user("u1") is None
        assert normalize_user({"id": 7, "name": "Num"}).id == "7"

    def test_as_list(self):
        assert as_list((1, 2)) == [1, 2]
        assert as_list({"a": 1}) == []
        assert as_list(None) == []

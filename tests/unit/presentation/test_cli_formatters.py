from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from py_category_sync.domain.categories import CategoryKind, UsageStats, UserCategory
from py_category_sync.presentation.cli.formatters import dataclass_to_dict, humanize_since

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "age,expected",
    [
        (timedelta(minutes=59), "just now"),
        (timedelta(hours=1), "1h ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
        (timedelta(hours=24), "1 day ago"),
        (timedelta(days=3, hours=5), "3 days ago"),
    ],
)
def test_humanize_since(age, expected):
    assert humanize_since(NOW - age, NOW) == expected


def test_humanize_never_and_naive():
    assert humanize_since(None, NOW) == "never"
    assert humanize_since((NOW - timedelta(hours=2)).replace(tzinfo=None), NOW) == "2h ago"


def test_dataclass_to_dict_converts_nested_values():
    row = UserCategory(
        id="1",
        name="Pets",
        kind=CategoryKind.EXPENSE,
        icon="paw",
        color="#795548",
        usage_stats=UsageStats(transaction_count=2, total_amount=Decimal("10.50"), last_used_at=NOW),
    )
    data = dataclass_to_dict([row])
    assert data[0]["kind"] == "expense"
    assert data[0]["usage_stats"] == {
        "transaction_count": 2,
        "total_amount": "10.50",
        "last_used_at": "2024-03-01T12:00:00+00:00",
    }
    assert data[0]["subcategories"] == []

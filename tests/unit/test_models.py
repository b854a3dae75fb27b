"""Unit tests for domain models and date helpers"""

from datetime import datetime, timedelta, timezone

import pytest

from spending_insights.domain.models import Budget, Goal, Transaction, TransactionType
from spending_insights.utils.date_utils import add_months, to_wall_clock


def test_percentage_used_reports_overspend():
    overspent = Budget(category="food", budget_amount=500, spent=750)
    partial = Budget(category="food", budget_amount=500, spent=100)
    unlimited = Budget(category="food", budget_amount=0, spent=100)

    assert overspent.percentage_used == pytest.approx(1.5)
    assert partial.percentage_used == pytest.approx(0.2)
    assert unlimited.percentage_used == 0.0


def test_goal_progress():
    funded = Goal(name="Trip", remaining_amount=250, days_remaining=30, target_amount=1000)
    unknown = Goal(name="Trip", remaining_amount=250, days_remaining=30)

    assert funded.progress_percentage == 75
    assert unknown.progress_percentage is None


def test_transaction_keeps_wall_clock_time():
    sao_paulo = timezone(timedelta(hours=-3))
    txn = Transaction(
        id="txn_1",
        date=datetime(2024, 6, 1, 23, 30, tzinfo=sao_paulo),
        amount=10,
        type=TransactionType.EXPENSE,
        category="food",
        description="Late snack",
    )

    assert txn.date == datetime(2024, 6, 1, 23, 30)
    assert txn.date.tzinfo is None


def test_to_wall_clock():
    naive = datetime(2024, 6, 1, 8)

    assert to_wall_clock(naive) is naive
    assert to_wall_clock(datetime(2024, 6, 1, 8, tzinfo=timezone.utc)) == naive


@pytest.mark.parametrize(
    "start,months,expected",
    [
        (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
        (datetime(2024, 3, 15), -3, datetime(2023, 12, 15)),
        (datetime(2024, 12, 1), 1, datetime(2025, 1, 1)),
    ],
)
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected

"""Pytest fixtures for testing"""

import itertools
from datetime import datetime
from typing import Callable

import pytest

from spending_insights.domain.models import Transaction, TransactionType
from spending_insights.service import FinancialAnalyticsService

# Fixed reference time so windows and month arithmetic are deterministic
NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory building transactions with unique ids"""
    ids = itertools.count(1)

    def _make(
        amount: float,
        date: datetime,
        category: str = "food",
        type: TransactionType = TransactionType.EXPENSE,
        description: str = "Purchase",
    ) -> Transaction:
        return Transaction(
            id=f"txn_{next(ids)}",
            date=date,
            amount=amount,
            type=type,
            category=category,
            description=description,
        )

    return _make


@pytest.fixture
def service() -> FinancialAnalyticsService:
    """Analytics service pinned to the fixed clock"""
    return FinancialAnalyticsService(clock=lambda: NOW)


@pytest.fixture
def sample_transactions(make_transaction) -> list[Transaction]:
    """Four months of salary, groceries, transport and subscriptions"""
    transactions = []
    for month in (3, 4, 5, 6):
        transactions += [
            make_transaction(3000, datetime(2024, month, 5, 9), "salary", TransactionType.INCOME, "Salary"),
            make_transaction(400 + month * 50, datetime(2024, month, 8, 18), "food", description="Supermarket"),
            make_transaction(120, datetime(2024, month, 12, 8), "transport", description="Fuel"),
            make_transaction(45, datetime(2024, month, 1, 10), "entertainment", description="Netflix"),
        ]
    return transactions

"""
E2E tests for user personas running the full analytics flow.

User personas:
- overspender: expenses above income, risk advice expected
- steady saver: budgets mostly unused, decrease suggestions expected
- gig worker: irregular income, volatility advice expected
- night owl: large purchase in the small hours, timing anomaly expected
"""

from datetime import datetime

import pytest

from spending_insights.domain.models import (
    AdvicePriority,
    AnomalyType,
    Budget,
    RiskLevel,
    TransactionType,
)

INCOME = TransactionType.INCOME


@pytest.mark.integration
def test_overspender(service, make_transaction):
    """
    overspender: spends 2100 a month on 2000 of income
    Expected: critical risk advice and a budget headed for overrun
    """
    transactions = []
    for month in (3, 4, 5):
        transactions += [
            make_transaction(2000, datetime(2024, month, 1), "salary", INCOME),
            make_transaction(1400, datetime(2024, month, 3), "housing"),
            make_transaction(700, datetime(2024, month, 12), "food"),
        ]
    transactions.append(make_transaction(700, datetime(2024, 6, 10), "food"))
    budgets = [Budget(category="food", budget_amount=800, spent=700)]

    predictions = service.predict_expenses(transactions)
    advice = service.generate_personalized_advice(transactions, budgets, [], predictions)
    overruns = service.predict_budget_overruns(transactions, budgets)

    assert advice[0].priority == AdvicePriority.CRITICAL
    assert advice[0].title == "ai.advice.risk.high.ratio.title"
    assert overruns[0].risk_level == RiskLevel.CRITICAL


@pytest.mark.integration
def test_steady_saver(service, make_transaction):
    """
    steady saver: small stable spending against generous budgets
    Expected: decrease suggestions and under-used budget advice
    """
    transactions = []
    for month in (4, 5, 6):
        transactions += [
            make_transaction(5000, datetime(2024, month, 1), "salary", INCOME),
            make_transaction(200, datetime(2024, month, 4), "food"),
            make_transaction(100, datetime(2024, month, 6), "transport"),
        ]
    budgets = [
        Budget(category="food", budget_amount=1000, spent=200),
        Budget(category="transport", budget_amount=600, spent=100),
    ]

    suggestions = service.generate_budget_suggestions(transactions, budgets)
    advice = service.generate_personalized_advice(transactions, budgets, [], [])

    assert {s.reasoning for s in suggestions} == {"ai.budget.suggestion.decrease"}
    assert all(s.suggested_amount < s.current_amount for s in suggestions)
    assert "ai.advice.budget.underutilized.title" in [a.title for a in advice]
    assert not any(a.priority == AdvicePriority.CRITICAL for a in advice)


@pytest.mark.integration
def test_gig_worker(service, make_transaction):
    """
    gig worker: income swings between 800 and 4000 a month
    Expected: income volatility advice
    """
    transactions = [
        make_transaction(amount, datetime(2024, month, 20), "freelance", INCOME)
        for month, amount in ((3, 800), (4, 4000), (5, 1200), (6, 3500))
    ]
    transactions += [
        make_transaction(1000, datetime(2024, month, 2), "housing") for month in (3, 4, 5, 6)
    ]

    advice = service.generate_personalized_advice(transactions, [], [], [])

    assert "ai.advice.income.volatile.title" in [a.title for a in advice]


@pytest.mark.integration
def test_night_owl(service, sample_transactions, make_transaction):
    """
    night owl: regular history plus a 1500 purchase at 02:30
    Expected: timing anomaly on that purchase
    """
    late_purchase = make_transaction(
        1500, datetime(2024, 6, 10, 2, 30), "shopping", description="Online store"
    )

    anomalies = service.detect_anomalies(sample_transactions + [late_purchase])

    timing = [a for a in anomalies if a.anomaly_type == AnomalyType.UNUSUAL_TIMING]
    assert [a.transaction.id for a in timing] == [late_purchase.id]

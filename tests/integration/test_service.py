"""Integration tests for the analytics service facade"""

import logging
from datetime import datetime, timezone

import pytest
from prometheus_client import REGISTRY

from spending_insights.config import Settings
from spending_insights.domain.models import Budget, Goal, SpendingTrend, TransactionType
from spending_insights.schemas import parse_transactions
from spending_insights.service import FinancialAnalyticsService, create_service

pytestmark = pytest.mark.integration


def _operation_count(operation: str) -> float:
    value = REGISTRY.get_sample_value("insights_analysis_total", {"operation": operation})
    return value or 0.0


def test_predict_expenses(service: FinancialAnalyticsService, sample_transactions):
    predictions = service.predict_expenses(sample_transactions, months_ahead=2)

    assert {p.category for p in predictions} == {"food", "transport", "entertainment"}
    food = predictions[0]
    assert food.category == "food"
    assert [p.month for p in food.predictions] == [7, 8]
    assert food.predictions[0].trend == SpendingTrend.INCREASING


def test_results_are_reproducible(service: FinancialAnalyticsService, sample_transactions):
    """Test the same input and clock give identical output"""
    budgets = [Budget(category="food", budget_amount=600, spent=580)]
    goals = [Goal(name="Emergency fund", remaining_amount=6000, days_remaining=90)]

    predictions = service.predict_expenses(sample_transactions)
    assert predictions == service.predict_expenses(sample_transactions)
    assert service.detect_anomalies(sample_transactions) == service.detect_anomalies(
        sample_transactions
    )
    assert service.generate_budget_suggestions(
        sample_transactions, budgets
    ) == service.generate_budget_suggestions(sample_transactions, budgets)

    first = service.generate_personalized_advice(sample_transactions, budgets, goals, predictions)
    second = service.generate_personalized_advice(sample_transactions, budgets, goals, predictions)
    assert first == second
    assert [a.id for a in first] == [a.id for a in second]


def test_config_is_applied(sample_transactions, now):
    """Test settings flow through to the domain functions"""
    strict = FinancialAnalyticsService(
        clock=lambda: now,
        config=Settings(prediction_min_transactions=5, anomaly_min_transactions=100),
    )

    assert strict.predict_expenses(sample_transactions) == []
    assert strict.detect_anomalies(sample_transactions) == []


def test_operations_are_counted(service: FinancialAnalyticsService, sample_transactions):
    before = _operation_count("detect_spending_patterns")

    service.detect_spending_patterns(sample_transactions, [])

    assert _operation_count("detect_spending_patterns") == before + 1


def test_operations_are_logged(service: FinancialAnalyticsService, sample_transactions, caplog):
    caplog.set_level(logging.INFO, logger="spending_insights")

    patterns = service.detect_spending_patterns(sample_transactions, [])

    records = [r for r in caplog.records if r.getMessage() == "Analysis completed"]
    assert len(records) == 1
    assert records[0].step == "detect_spending_patterns"
    assert records[0].input_count == len(sample_transactions)
    assert records[0].result_count == len(patterns)
    assert records[0].duration_ms >= 0


def test_advice_counted_by_priority(service: FinancialAnalyticsService, make_transaction):
    transactions = [
        make_transaction(1000, datetime(2024, 5, 1), "salary", TransactionType.INCOME),
        make_transaction(990, datetime(2024, 5, 2), "housing"),
    ]
    labels = {"priority": "critical"}
    before = REGISTRY.get_sample_value("insights_advice_total", labels) or 0.0

    service.generate_personalized_advice(transactions, [], [], [])

    assert REGISTRY.get_sample_value("insights_advice_total", labels) == before + 1


def test_categorize_transactions(service: FinancialAnalyticsService, make_transaction, now):
    transactions = [make_transaction(25, now, "other", description="Uber ride")]

    assert service.categorize_transactions(transactions)[0].category == "transport"


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_create_service(restore_root_logger, now):
    config = Settings(log_level="WARNING")

    service = create_service(clock=lambda: now, config=config)

    assert service.config is config
    assert service.clock() == now
    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 1


@pytest.fixture
def utc_records():
    """Stored records with UTC offsets, as serialised by most backends"""
    return [
        {
            "id": f"txn_{month}",
            "date": f"2024-0{month}-10T12:00:00Z",
            "amount": 100 + month * 10,
            "type": "expense",
            "category": "food",
            "description": "Market",
        }
        for month in (3, 4, 5, 6)
    ]


def test_offset_timestamps_with_default_clock(utc_records):
    transactions = parse_transactions(utc_records)
    service = FinancialAnalyticsService()

    assert isinstance(service.predict_expenses(transactions), list)
    assert isinstance(service.generate_budget_suggestions(transactions, []), list)
    assert isinstance(service.generate_personalized_advice(transactions, [], [], []), list)
    assert isinstance(service.generate_insights(transactions, [], []), list)


def test_offset_timestamps_with_aware_clock(utc_records):
    transactions = parse_transactions(utc_records)
    aware_now = datetime(2024, 6, 15, 12, tzinfo=timezone.utc)
    service = FinancialAnalyticsService(clock=lambda: aware_now)

    predictions = service.predict_expenses(transactions)
    suggestions = service.generate_budget_suggestions(transactions, [])

    assert [p.category for p in predictions] == ["food"]
    assert predictions[0].data_point_count == 4
    assert [s.category for s in suggestions] == ["food"]


def test_generate_insights(service: FinancialAnalyticsService, make_transaction):
    transactions = [
        make_transaction(100, datetime(2024, 5, 10), "food", description="Bakery"),
        make_transaction(300, datetime(2024, 6, 10), "food", description="Restaurant"),
    ]
    labels = {"type": "warning", "priority": "high"}
    before = REGISTRY.get_sample_value("insights_generated_total", labels) or 0.0

    insights = service.generate_insights(transactions, [], [])

    assert insights[0].title == "insights.spending.increase.title"
    assert insights[0].value == pytest.approx(200)
    assert REGISTRY.get_sample_value("insights_generated_total", labels) == before + 1

"""Analytics facade exposed to the presentation layer.

The service holds no mutable state: one instance is created by the composition
root and shared, and concurrent callers need no coordination. The only
dependency is the clock, injected so results are reproducible in tests.
"""

import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from spending_insights.config import Settings, settings as default_settings
from spending_insights.domain.advice import generate_personalized_advice
from spending_insights.domain.anomalies import detect_anomalies
from spending_insights.domain.budgeting import generate_budget_suggestions, predict_budget_overruns
from spending_insights.domain.insights import generate_insights
from spending_insights.domain.models import (
    Budget,
    BudgetPrediction,
    BudgetSuggestion,
    ExpensePrediction,
    FinancialInsight,
    Goal,
    PersonalizedAdvice,
    SpendingPattern,
    Transaction,
    TransactionAnomaly,
)
from spending_insights.domain.patterns import categorize_transactions, detect_spending_patterns
from spending_insights.domain.prediction import predict_expenses
from spending_insights.infrastructure.observability.logging import log_analysis, setup_logging
from spending_insights.infrastructure.observability.metrics import (
    record_advice,
    record_analysis,
    record_anomalies,
    record_insights,
)
from spending_insights.utils.date_utils import to_wall_clock

Clock = Callable[[], datetime]


class FinancialAnalyticsService:
    """Stateless entry point for forecasts, anomaly flags, budget suggestions, advice, insights"""

    def __init__(self, clock: Optional[Clock] = None, config: Optional[Settings] = None):
        self.clock = clock or datetime.now
        self.config = config or default_settings

    def _now(self) -> datetime:
        return to_wall_clock(self.clock())

    def _finish(self, operation: str, start_time: float, input_count: int, results: list) -> None:
        duration = time.perf_counter() - start_time
        record_analysis(operation, duration)
        log_analysis(operation, input_count, len(results), duration * 1000)

    def predict_expenses(
        self, transactions: Sequence[Transaction], months_ahead: int = 3
    ) -> List[ExpensePrediction]:
        """Forecast per-category expenses for the next ``months_ahead`` months"""
        start_time = time.perf_counter()
        predictions = predict_expenses(
            transactions,
            months_ahead,
            now=self._now(),
            lookback_months=self.config.prediction_lookback_months,
            min_transactions=self.config.prediction_min_transactions,
        )
        self._finish("predict_expenses", start_time, len(transactions), predictions)
        return predictions

    def detect_anomalies(self, transactions: Sequence[Transaction]) -> List[TransactionAnomaly]:
        """Flag unusual amounts, frequency spikes, late-night spending and duplicates"""
        start_time = time.perf_counter()
        anomalies = detect_anomalies(
            transactions,
            min_transactions=self.config.anomaly_min_transactions,
            large_night_amount=self.config.large_night_amount,
        )
        record_anomalies(anomalies)
        self._finish("detect_anomalies", start_time, len(transactions), anomalies)
        return anomalies

    def generate_budget_suggestions(
        self, transactions: Sequence[Transaction], current_budgets: Sequence[Budget]
    ) -> List[BudgetSuggestion]:
        start_time = time.perf_counter()
        suggestions = generate_budget_suggestions(
            transactions,
            current_budgets,
            now=self._now(),
            lookback_months=self.config.budget_lookback_months,
        )
        self._finish("generate_budget_suggestions", start_time, len(transactions), suggestions)
        return suggestions

    def generate_personalized_advice(
        self,
        transactions: Sequence[Transaction],
        budgets: Sequence[Budget],
        goals: Sequence[Goal],
        predictions: Sequence[ExpensePrediction],
    ) -> List[PersonalizedAdvice]:
        """Prioritised advice; pass the output of predict_expenses as ``predictions``"""
        start_time = time.perf_counter()
        advice = generate_personalized_advice(
            transactions,
            budgets,
            goals,
            predictions,
            now=self._now(),
            subscription_alert_threshold=self.config.subscription_alert_threshold,
        )
        record_advice(advice)
        self._finish("generate_personalized_advice", start_time, len(transactions), advice)
        return advice

    def predict_budget_overruns(
        self, transactions: Sequence[Transaction], budgets: Sequence[Budget]
    ) -> List[BudgetPrediction]:
        start_time = time.perf_counter()
        predictions = predict_budget_overruns(transactions, budgets, now=self._now())
        self._finish("predict_budget_overruns", start_time, len(transactions), predictions)
        return predictions

    def detect_spending_patterns(
        self, transactions: Sequence[Transaction], budgets: Sequence[Budget]
    ) -> List[SpendingPattern]:
        start_time = time.perf_counter()
        patterns = detect_spending_patterns(transactions, budgets)
        self._finish("detect_spending_patterns", start_time, len(transactions), patterns)
        return patterns

    def generate_insights(
        self,
        transactions: Sequence[Transaction],
        budgets: Sequence[Budget],
        goals: Sequence[Goal],
    ) -> List[FinancialInsight]:
        """Month-over-month change, budget risk, goal progress and recurring spend"""
        start_time = time.perf_counter()
        insights = generate_insights(transactions, budgets, goals, now=self._now())
        record_insights(insights)
        self._finish("generate_insights", start_time, len(transactions), insights)
        return insights

    def categorize_transactions(self, transactions: Sequence[Transaction]) -> List[Transaction]:
        start_time = time.perf_counter()
        categorized = categorize_transactions(transactions)
        self._finish("categorize_transactions", start_time, len(transactions), categorized)
        return categorized


def create_service(
    clock: Optional[Clock] = None, config: Optional[Settings] = None
) -> FinancialAnalyticsService:
    """Composition root helper: configure logging and build the shared service instance"""
    config = config or default_settings
    setup_logging(config.log_level)
    return FinancialAnalyticsService(clock=clock, config=config)

"""Category-level expense forecasting"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from spending_insights.domain.models import (
    ExpensePrediction,
    MonthlyPrediction,
    SpendingTrend,
    Transaction,
    TransactionType,
)
from spending_insights.domain.seasonality import calculate_seasonal_factors
from spending_insights.domain.stats import consistency_confidence
from spending_insights.domain.timeseries import aggregate_by_category
from spending_insights.domain.trend import calculate_trend_slope

logger = logging.getLogger(__name__)

LOOKBACK_MONTHS = 6
MIN_TRANSACTIONS = 3


def classify_trend(slope: float) -> SpendingTrend:
    if slope > 0:
        return SpendingTrend.INCREASING
    if slope < 0:
        return SpendingTrend.DECREASING
    return SpendingTrend.STABLE


def predict_expenses(
    transactions: Sequence[Transaction],
    months_ahead: int = 3,
    now: Optional[datetime] = None,
    lookback_months: int = LOOKBACK_MONTHS,
    min_transactions: int = MIN_TRANSACTIONS,
) -> List[ExpensePrediction]:
    """
    Forecast expense totals per category for the next ``months_ahead`` months.

    Requirements:
    - Only categories with at least ``min_transactions`` expenses in the
      lookback window are forecast
    - predicted = max(0, (average + slope * i) * seasonal_factor[month]) for
      the i-th future month, wrapping December to January
    - Confidence comes from the consistency of the monthly totals

    Returns:
        Predictions sorted by the first forecast month's amount, largest first
    """
    if not transactions or months_ahead < 1:
        return []

    now = now or datetime.now()
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]
    series_by_category = aggregate_by_category(
        expenses, lookback_months, now=now, min_samples=min_transactions
    )

    predictions = []
    for category, series in series_by_category.items():
        slope = calculate_trend_slope(series.values)
        seasonal_factors = calculate_seasonal_factors(series.transactions)
        confidence = consistency_confidence(series.values)
        trend = classify_trend(slope)

        monthly = []
        for i in range(1, months_ahead + 1):
            target_month = (now.month + i - 1) % 12 + 1
            base_amount = series.average + slope * i
            predicted = base_amount * seasonal_factors[target_month - 1]
            monthly.append(
                MonthlyPrediction(
                    month=target_month,
                    predicted_amount=max(0.0, predicted),
                    confidence=confidence,
                    trend=trend,
                )
            )

        predictions.append(
            ExpensePrediction(
                category=category,
                predictions=monthly,
                historical_average=series.average,
                trend_slope=slope,
                data_point_count=len(series.transactions),
            )
        )

    if not predictions:
        logger.debug("No category has enough expense history to forecast")

    return sorted(predictions, key=lambda p: p.predictions[0].predicted_amount, reverse=True)

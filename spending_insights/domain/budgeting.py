"""Budget ceiling suggestions and month-end budget projections"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from spending_insights.domain.models import (
    Budget,
    BudgetPrediction,
    BudgetSuggestion,
    ImpactLevel,
    RiskLevel,
    Transaction,
    TransactionType,
)
from spending_insights.domain.stats import (
    clamp,
    consistency_confidence,
    mean,
    median,
    percentile,
    safe_divide,
    std_dev,
)
from spending_insights.domain.timeseries import aggregate_by_category
from spending_insights.utils.date_utils import days_in_month, is_same_month, to_wall_clock

logger = logging.getLogger(__name__)

LOOKBACK_MONTHS = 3

# Budget utilisation bands
INCREASE_AT = 0.95
DECREASE_AT = 0.60

# Headroom added on top of the observed spending statistic
NEW_BUDGET_BUFFER = 1.15
INCREASE_BUFFER = 1.10
DECREASE_BUFFER = 1.15


def find_budget(category: str, budgets: Sequence[Budget]) -> Optional[Budget]:
    return next((b for b in budgets if b.category == category), None)


def calculate_budget_confidence(monthly_totals: Sequence[float], suggestion: float) -> float:
    """
    Average of coverage and consistency.

    Coverage: share of monthly totals within 2 standard deviations of the
    suggestion. Consistency: clamp(1 - CoV, 0, 1).
    """
    if not monthly_totals:
        return 0.0

    deviation = std_dev(monthly_totals)
    covered = sum(1 for total in monthly_totals if abs(total - suggestion) <= 2 * deviation)
    coverage = covered / len(monthly_totals)

    return clamp((coverage + consistency_confidence(monthly_totals)) / 2)


def calculate_impact_level(current: Optional[float], suggested: float) -> ImpactLevel:
    """Relative change against the current budget; a new budget is always high impact"""
    if current is None or current <= 0:
        return ImpactLevel.HIGH

    change = abs(suggested - current) / current
    if change > 0.3:
        return ImpactLevel.HIGH
    elif change > 0.15:
        return ImpactLevel.MEDIUM
    else:
        return ImpactLevel.LOW


def generate_budget_suggestions(
    transactions: Sequence[Transaction],
    current_budgets: Sequence[Budget],
    now: Optional[datetime] = None,
    lookback_months: int = LOOKBACK_MONTHS,
) -> List[BudgetSuggestion]:
    """
    Suggest a budget ceiling per expense category from recent monthly totals.

    Decision rules:
    - No budget:            90th percentile * 1.15  ("new")
    - Used >= 95%:          90th percentile * 1.10  ("increase")
    - Used <= 60%:          median * 1.15           ("decrease")
    - Otherwise the budget is left alone and nothing is suggested

    Returns:
        Suggestions sorted by impact level, highest first
    """
    if not transactions:
        return []

    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]
    series_by_category = aggregate_by_category(expenses, lookback_months, now=now, min_samples=1)

    suggestions = []
    for category, series in series_by_category.items():
        totals = series.values
        avg = mean(totals)
        mid = median(totals)
        p90 = percentile(totals, 0.9)

        budget = find_budget(category, current_budgets)
        if budget is None:
            suggested = p90 * NEW_BUDGET_BUFFER
            reasoning = "ai.budget.suggestion.new"
        elif budget.percentage_used >= INCREASE_AT:
            suggested = p90 * INCREASE_BUFFER
            reasoning = "ai.budget.suggestion.increase"
        elif budget.percentage_used <= DECREASE_AT:
            suggested = mid * DECREASE_BUFFER
            reasoning = "ai.budget.suggestion.decrease"
        else:
            continue

        suggested = max(0.0, suggested)
        current_amount = budget.budget_amount if budget else None

        suggestions.append(
            BudgetSuggestion(
                category=category,
                suggested_amount=suggested,
                current_amount=current_amount,
                average_spending=avg,
                median_spending=mid,
                percentile_90=p90,
                confidence=calculate_budget_confidence(totals, suggested),
                reasoning=reasoning,
                impact_level=calculate_impact_level(current_amount, suggested),
            )
        )

    return sorted(suggestions, key=lambda s: s.impact_level.rank, reverse=True)


def calculate_risk_level(projected: float, limit: float) -> RiskLevel:
    """Map projected spend as a share of the limit onto a risk band"""
    ratio = safe_divide(projected, limit)
    if ratio >= 1.1:
        return RiskLevel.CRITICAL
    elif ratio >= 1.0:
        return RiskLevel.HIGH
    elif ratio >= 0.9:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def predict_budget_overruns(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    now: Optional[datetime] = None,
) -> List[BudgetPrediction]:
    """
    Project each budget's month-end spend from the current month's daily pace.

    Days are counted from the start of the month, so on the 1st no full day has
    passed and the pace is zero.
    """
    now = to_wall_clock(now or datetime.now())
    month_length = days_in_month(now)
    days_passed = now.day - 1
    days_remaining = month_length - 1 - days_passed

    predictions = []
    for budget in budgets:
        current_spent = sum(
            t.amount
            for t in transactions
            if t.type == TransactionType.EXPENSE
            and t.category == budget.category
            and is_same_month(t.date, now)
        )
        daily_average = safe_divide(current_spent, days_passed)
        projected_total = current_spent + daily_average * days_remaining
        risk = calculate_risk_level(projected_total, budget.budget_amount)

        predictions.append(
            BudgetPrediction(
                budget=budget,
                current_spent=current_spent,
                projected_total=projected_total,
                days_remaining=days_remaining,
                risk_level=risk,
                recommendation=f"insights.recommendation.{risk.value}",
            )
        )

    return sorted(predictions, key=lambda p: p.risk_level.rank, reverse=True)

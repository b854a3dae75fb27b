"""Dashboard insights over the current month, budgets, goals and recurring spend"""

import re
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from spending_insights.domain.budgeting import predict_budget_overruns
from spending_insights.domain.models import (
    Budget,
    FinancialInsight,
    Goal,
    InsightCategory,
    InsightPriority,
    InsightType,
    RiskLevel,
    Transaction,
    TransactionType,
)
from spending_insights.domain.stats import mean, safe_divide
from spending_insights.domain.timeseries import group_by_category
from spending_insights.utils.date_utils import add_months, is_same_month, to_wall_clock

# Month-over-month change, in percent
SPENDING_INCREASE_PCT = 20.0
SPENDING_DECREASE_PCT = -15.0

TOP_CATEGORY_PCT = 40.0
GOAL_NEAR_COMPLETION_PCT = 90.0
GOAL_BEHIND_MARGIN_PCT = 20.0
RECURRING_LOOKBACK_MONTHS = 3
UNUSUAL_MULTIPLIER = 3.0

_INSIGHT_NAMESPACE = uuid.UUID("5d2c9a71-3e4b-5f60-9a8b-7c6d5e4f3a2b")
_DIGITS = re.compile(r"[0-9]")


def _insight(
    key: str,
    insight_type: InsightType,
    category: InsightCategory,
    value: float,
    priority: InsightPriority,
    actionable: bool,
    metadata: Optional[Dict[str, str]] = None,
    subject: str = "",
) -> FinancialInsight:
    return FinancialInsight(
        id=str(uuid.uuid5(_INSIGHT_NAMESPACE, f"{key}:{subject}")),
        type=insight_type,
        category=category,
        title=f"insights.{key}.title",
        message=f"insights.{key}.message",
        value=value,
        priority=priority,
        actionable=actionable,
        metadata=metadata or {},
    )


def _expenses_in_month(transactions: Sequence[Transaction], month: datetime) -> List[Transaction]:
    return [
        t for t in transactions
        if t.type == TransactionType.EXPENSE and is_same_month(t.date, month)
    ]


def spending_insights(transactions: Sequence[Transaction], now: datetime) -> List[FinancialInsight]:
    """Month-over-month change and the dominant category of this month"""
    this_month = _expenses_in_month(transactions, now)
    last_month = _expenses_in_month(transactions, add_months(now, -1))
    this_total = sum(t.amount for t in this_month)
    last_total = sum(t.amount for t in last_month)

    insights = []
    if last_total > 0:
        change = (this_total - last_total) / last_total * 100
        if change > SPENDING_INCREASE_PCT:
            insights.append(
                _insight(
                    "spending.increase",
                    InsightType.WARNING,
                    InsightCategory.SPENDING,
                    change,
                    InsightPriority.HIGH,
                    actionable=True,
                )
            )
        elif change < SPENDING_DECREASE_PCT:
            insights.append(
                _insight(
                    "spending.decrease",
                    InsightType.POSITIVE,
                    InsightCategory.SPENDING,
                    abs(change),
                    InsightPriority.MEDIUM,
                    actionable=False,
                )
            )

    totals = {
        category: sum(t.amount for t in txns)
        for category, txns in group_by_category(this_month).items()
    }
    if totals:
        top_category, top_total = max(totals.items(), key=lambda item: item[1])
        percentage = safe_divide(top_total, this_total) * 100
        if percentage > TOP_CATEGORY_PCT:
            insights.append(
                _insight(
                    "top.category",
                    InsightType.INFO,
                    InsightCategory.SPENDING,
                    percentage,
                    InsightPriority.MEDIUM,
                    actionable=True,
                    metadata={"category": top_category},
                    subject=top_category,
                )
            )
    return insights


def budget_insights(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    now: datetime,
) -> List[FinancialInsight]:
    """Budgets projected to reach or exceed their limit by month end"""
    insights = []
    for prediction in predict_budget_overruns(transactions, budgets, now=now):
        if prediction.risk_level not in (RiskLevel.HIGH, RiskLevel.CRITICAL):
            continue

        budget = prediction.budget
        priority = (
            InsightPriority.CRITICAL
            if prediction.risk_level == RiskLevel.CRITICAL
            else InsightPriority.HIGH
        )
        insights.append(
            _insight(
                "budget.risk",
                InsightType.WARNING,
                InsightCategory.BUDGET,
                safe_divide(prediction.projected_total, budget.budget_amount) * 100,
                priority,
                actionable=True,
                metadata={"budgetName": budget.name or budget.category},
                subject=budget.category,
            )
        )
    return insights


def goal_insights(goals: Sequence[Goal]) -> List[FinancialInsight]:
    """
    Goals close to completion or behind schedule.

    Expected progress assumes a one-year horizon: a goal due in d days should
    be 100 - d / 365 * 100 percent funded. Goals without a target amount have
    no known progress and are skipped.
    """
    insights = []
    for goal in goals:
        progress = goal.progress_percentage
        if not goal.is_active or progress is None:
            continue

        if GOAL_NEAR_COMPLETION_PCT <= progress < 100:
            insights.append(
                _insight(
                    "goal.near.completion",
                    InsightType.POSITIVE,
                    InsightCategory.GOALS,
                    progress,
                    InsightPriority.HIGH,
                    actionable=False,
                    metadata={"goalName": goal.name},
                    subject=goal.name,
                )
            )

        days_remaining = goal.days_remaining
        expected = min(100.0, max(0.0, 100 - days_remaining / 365 * 100))
        if progress < expected - GOAL_BEHIND_MARGIN_PCT and days_remaining > 0:
            insights.append(
                _insight(
                    "goal.behind.schedule",
                    InsightType.WARNING,
                    InsightCategory.GOALS,
                    expected - progress,
                    InsightPriority.MEDIUM,
                    actionable=True,
                    metadata={"goalName": goal.name},
                    subject=goal.name,
                )
            )
    return insights


def normalize_description(description: str) -> str:
    """Lowercase with digits removed, so "Netflix 03/24" and "Netflix 04/24" match"""
    return _DIGITS.sub("", (description or "").lower()).strip()


def find_recurring_transactions(
    transactions: Sequence[Transaction], now: datetime
) -> List[Transaction]:
    """Expenses of the last three months whose normalised description repeats"""
    start = add_months(now, -RECURRING_LOOKBACK_MONTHS)
    groups: Dict[str, List[Transaction]] = {}
    for txn in transactions:
        if txn.type == TransactionType.EXPENSE and txn.date >= start:
            groups.setdefault(normalize_description(txn.description), []).append(txn)

    return [txn for txns in groups.values() if len(txns) >= 2 for txn in txns]


def find_unusual_spending(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Transactions above three times the average amount"""
    if not transactions:
        return []
    average = mean([t.amount for t in transactions])
    return [t for t in transactions if t.amount > average * UNUSUAL_MULTIPLIER]


def savings_insights(transactions: Sequence[Transaction], now: datetime) -> List[FinancialInsight]:
    insights = []

    recurring = find_recurring_transactions(transactions, now)
    if recurring:
        insights.append(
            _insight(
                "subscriptions",
                InsightType.INFO,
                InsightCategory.SAVINGS,
                sum(t.amount for t in recurring),
                InsightPriority.MEDIUM,
                actionable=True,
                metadata={"count": str(len(recurring))},
            )
        )

    unusual = find_unusual_spending(_expenses_in_month(transactions, now))
    if unusual:
        insights.append(
            _insight(
                "unusual.spending",
                InsightType.INFO,
                InsightCategory.SPENDING,
                float(len(unusual)),
                InsightPriority.LOW,
                actionable=False,
            )
        )
    return insights


def generate_insights(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    goals: Sequence[Goal],
    now: Optional[datetime] = None,
) -> List[FinancialInsight]:
    """
    Collect spending, budget, goal and savings insights.

    Returns:
        Insights sorted by priority (critical first), ties kept in generation order
    """
    now = to_wall_clock(now or datetime.now())

    insights: List[FinancialInsight] = []
    insights.extend(spending_insights(transactions, now))
    insights.extend(budget_insights(transactions, budgets, now))
    insights.extend(goal_insights(goals))
    insights.extend(savings_insights(transactions, now))

    return sorted(insights, key=lambda i: i.priority.rank, reverse=True)

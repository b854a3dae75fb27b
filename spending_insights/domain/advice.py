"""Rule-based personalised advice.

Each analyzer is an independent pure rule returning zero or more advice items.
Items carry message keys plus a metadata map; turning them into text is left
to the presentation layer.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from spending_insights.domain.models import (
    AdviceCategory,
    AdvicePriority,
    Budget,
    ExpensePrediction,
    Goal,
    PersonalizedAdvice,
    Transaction,
    TransactionType,
)
from spending_insights.domain.stats import coefficient_of_variation
from spending_insights.domain.timeseries import group_by_category, monthly_totals
from spending_insights.utils.date_utils import add_months, to_wall_clock

CONCENTRATION_SHARE = 0.5
UNDERUTILIZED_USAGE = 0.5
GOAL_INCOME_SHARE = 0.3
SUBSCRIPTION_CATEGORIES = ("entertainment", "bills")
SUBSCRIPTION_ALERT_THRESHOLD = 500.0
INCOME_VOLATILITY_COV = 0.3
RISK_EXPENSE_RATIO = 0.9

_ADVICE_NAMESPACE = uuid.UUID("0b8e4f52-7a31-5c6d-8e9f-1a2b3c4d5e6f")


def _advice(
    key: str,
    category: AdviceCategory,
    priority: AdvicePriority,
    potential_savings: float,
    metadata: Dict[str, str],
    subject: str = "",
) -> PersonalizedAdvice:
    return PersonalizedAdvice(
        id=str(uuid.uuid5(_ADVICE_NAMESPACE, f"{key}:{subject}")),
        title=f"ai.advice.{key}.title",
        message=f"ai.advice.{key}.message",
        category=category,
        priority=priority,
        actionable=True,
        potential_savings=max(0.0, potential_savings),
        metadata=metadata,
    )


def _of_type(transactions: Sequence[Transaction], txn_type: TransactionType) -> List[Transaction]:
    return [t for t in transactions if t.type == txn_type]


def analyze_spending_concentration(transactions: Sequence[Transaction]) -> List[PersonalizedAdvice]:
    """One category taking more than half of all expenses"""
    expenses = _of_type(transactions, TransactionType.EXPENSE)
    totals = {
        category: sum(t.amount for t in txns)
        for category, txns in group_by_category(expenses).items()
    }
    total_expenses = sum(totals.values())
    if total_expenses <= 0:
        return []

    top_category, top_total = max(totals.items(), key=lambda item: item[1])
    share = top_total / total_expenses
    if share <= CONCENTRATION_SHARE:
        return []

    return [
        _advice(
            "spending.concentration",
            AdviceCategory.SPENDING,
            AdvicePriority.HIGH,
            top_total * 0.1,
            {"category": top_category, "percentage": f"{share * 100:.0f}"},
            subject=top_category,
        )
    ]


def analyze_budget_optimization(budgets: Sequence[Budget]) -> List[PersonalizedAdvice]:
    """Two or more active budgets less than half used"""
    underutilized = [b for b in budgets if b.is_active and b.percentage_used < UNDERUTILIZED_USAGE]
    if len(underutilized) < 2:
        return []

    total_unused = sum(max(0.0, b.remaining) for b in underutilized)
    return [
        _advice(
            "budget.underutilized",
            AdviceCategory.BUDGETING,
            AdvicePriority.MEDIUM,
            total_unused,
            {"count": str(len(underutilized))},
        )
    ]


def analyze_goal_strategies(
    goals: Sequence[Goal],
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> List[PersonalizedAdvice]:
    """Goals whose required monthly contribution exceeds 30% of last month's income"""
    now = to_wall_clock(now or datetime.now())
    month_ago = add_months(now, -1)
    recent_income = sum(
        t.amount for t in _of_type(transactions, TransactionType.INCOME) if t.date >= month_ago
    )

    advice = []
    for goal in goals:
        if not goal.is_active or goal.is_completed:
            continue

        months_remaining = max(1.0, goal.days_remaining / 30)
        required_monthly = goal.remaining_amount / months_remaining

        if required_monthly > recent_income * GOAL_INCOME_SHARE:
            advice.append(
                _advice(
                    "goal.challenging",
                    AdviceCategory.GOALS,
                    AdvicePriority.HIGH,
                    0.0,
                    {"goalName": goal.name, "requiredMonthly": f"{required_monthly:.2f}"},
                    subject=goal.name,
                )
            )
    return advice


def analyze_savings_opportunities(
    transactions: Sequence[Transaction],
    alert_threshold: float = SUBSCRIPTION_ALERT_THRESHOLD,
) -> List[PersonalizedAdvice]:
    """Recurring entertainment and bill payments adding up to a large monthly load"""
    subscriptions: Dict[str, List[float]] = {}
    for txn in _of_type(transactions, TransactionType.EXPENSE):
        if txn.category in SUBSCRIPTION_CATEGORIES:
            subscriptions.setdefault(txn.description, []).append(txn.amount)

    # A description seen at least twice counts as recurring
    recurring = {
        desc: sum(amounts) / len(amounts)
        for desc, amounts in subscriptions.items()
        if len(amounts) >= 2
    }
    monthly_total = sum(recurring.values())
    if monthly_total <= alert_threshold:
        return []

    return [
        _advice(
            "subscriptions.review",
            AdviceCategory.SAVINGS,
            AdvicePriority.MEDIUM,
            monthly_total * 0.3,
            {"monthlyTotal": f"{monthly_total:.2f}", "count": str(len(recurring))},
        )
    ]


def analyze_income_patterns(transactions: Sequence[Transaction]) -> List[PersonalizedAdvice]:
    """Monthly income varying by more than 30% of its mean"""
    monthly_income = list(monthly_totals(_of_type(transactions, TransactionType.INCOME)).values())
    if len(monthly_income) < 3:
        return []

    variability = coefficient_of_variation(monthly_income, non_positive_mean=0.0)
    if variability <= INCOME_VOLATILITY_COV:
        return []

    return [
        _advice(
            "income.volatile",
            AdviceCategory.INCOME,
            AdvicePriority.HIGH,
            0.0,
            {"variability": f"{variability * 100:.0f}%"},
        )
    ]


def analyze_financial_risks(transactions: Sequence[Transaction]) -> List[PersonalizedAdvice]:
    """Expenses above 90% of income"""
    total_expenses = sum(t.amount for t in _of_type(transactions, TransactionType.EXPENSE))
    total_income = sum(t.amount for t in _of_type(transactions, TransactionType.INCOME))
    if total_income <= 0:
        return []

    ratio = total_expenses / total_income
    if ratio <= RISK_EXPENSE_RATIO:
        return []

    return [
        _advice(
            "risk.high.ratio",
            AdviceCategory.RISK,
            AdvicePriority.CRITICAL,
            total_expenses * 0.15,
            {"ratio": f"{ratio * 100:.0f}%"},
        )
    ]


def generate_personalized_advice(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    goals: Sequence[Goal],
    predictions: Sequence[ExpensePrediction],
    now: Optional[datetime] = None,
    subscription_alert_threshold: float = SUBSCRIPTION_ALERT_THRESHOLD,
) -> List[PersonalizedAdvice]:
    """
    Collect advice from every analyzer.

    ``predictions`` is accepted for callers that already hold a forecast; no
    current rule reads it.

    Returns:
        Advice sorted by priority (critical first), ties kept in analyzer order
    """
    advice: List[PersonalizedAdvice] = []
    advice.extend(analyze_spending_concentration(transactions))
    advice.extend(analyze_budget_optimization(budgets))
    advice.extend(analyze_goal_strategies(goals, transactions, now))
    advice.extend(analyze_savings_opportunities(transactions, subscription_alert_threshold))
    advice.extend(analyze_income_patterns(transactions))
    advice.extend(analyze_financial_risks(transactions))

    return sorted(advice, key=lambda a: a.priority.rank, reverse=True)

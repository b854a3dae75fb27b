"""Spending patterns per category and keyword-based categorisation"""

from dataclasses import replace
from typing import List, Sequence

from spending_insights.domain.budgeting import find_budget
from spending_insights.domain.models import (
    Budget,
    BudgetStatus,
    SpendingPattern,
    SpendingTrend,
    Transaction,
    TransactionType,
)
from spending_insights.domain.stats import safe_divide
from spending_insights.domain.timeseries import group_by_category

UNCATEGORIZED = "other"

# First matching category wins
CATEGORY_RULES = {
    "food": [
        "restaurante", "restaurant", "ifood", "uber eats", "rappi",
        "supermercado", "mercado", "grocery",
    ],
    "transport": ["uber", "taxi", "posto", "gasolina", "combustível", "fuel", "parking"],
    "shopping": ["amazon", "mercado livre", "americanas", "magazine"],
    "entertainment": ["netflix", "spotify", "cinema", "streaming"],
    "healthcare": ["farmácia", "pharmacy", "hospital", "médico", "clínica", "doctor"],
    "bills": ["energia", "água", "internet", "celular", "aluguel", "electricity", "water", "phone"],
}

TREND_CHANGE = 0.2


def detect_category(description: str) -> str:
    """Category inferred from description keywords, ``other`` when nothing matches"""
    lowered = (description or "").lower()
    for category, keywords in CATEGORY_RULES.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return UNCATEGORIZED


def categorize_transactions(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Fill in the category of uncategorised transactions; categorised ones are returned as-is"""
    return [
        replace(txn, category=detect_category(txn.description))
        if txn.category == UNCATEGORIZED
        else txn
        for txn in transactions
    ]


def detect_half_split_trend(transactions: Sequence[Transaction]) -> SpendingTrend:
    """Compare spend in the later half of the history against the earlier half"""
    if len(transactions) < 4:
        return SpendingTrend.STABLE

    ordered = sorted(transactions, key=lambda t: t.date)
    midpoint = len(ordered) // 2
    first_total = sum(t.amount for t in ordered[:midpoint])
    second_total = sum(t.amount for t in ordered[midpoint:])

    change = safe_divide(second_total - first_total, first_total)
    if change > TREND_CHANGE:
        return SpendingTrend.INCREASING
    elif change < -TREND_CHANGE:
        return SpendingTrend.DECREASING
    return SpendingTrend.STABLE


def compare_to_budget(category: str, spent: float, budgets: Sequence[Budget]) -> BudgetStatus:
    budget = find_budget(category, budgets)
    if budget is None:
        return BudgetStatus.NO_BUDGET

    used = safe_divide(spent, budget.budget_amount)
    if used >= 1.0:
        return BudgetStatus.EXCEEDED
    elif used >= 0.9:
        return BudgetStatus.CRITICAL
    elif used >= 0.8:
        return BudgetStatus.WARNING
    else:
        return BudgetStatus.HEALTHY


def detect_spending_patterns(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
) -> List[SpendingPattern]:
    """
    Summarise expense behaviour per category.

    Returns:
        One pattern per category with expenses, largest total spend first
    """
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    patterns = []
    for category, txns in group_by_category(expenses).items():
        total = sum(t.amount for t in txns)
        patterns.append(
            SpendingPattern(
                category=category,
                total_spent=total,
                average_transaction=total / len(txns),
                frequency=len(txns),
                trend=detect_half_split_trend(txns),
                budget_status=compare_to_budget(category, total, budgets),
            )
        )

    return sorted(patterns, key=lambda p: p.total_spent, reverse=True)

"""Time-series aggregation of transactions by category and calendar month"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from spending_insights.domain.models import MonthlySeries, Transaction
from spending_insights.domain.stats import mean
from spending_insights.utils.date_utils import add_months, month_key, to_wall_clock


def group_by_category(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    """Group transactions by category, preserving first-seen order"""
    groups: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        groups[txn.category].append(txn)
    return dict(groups)


def group_by_month(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    """Group transactions by year-month key, ordered chronologically"""
    groups: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        groups[month_key(txn.date)].append(txn)
    return {key: groups[key] for key in sorted(groups)}


def monthly_totals(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Sum of amounts per year-month key; months without transactions are absent"""
    return {key: sum(t.amount for t in txns) for key, txns in group_by_month(transactions).items()}


def within_window(
    transactions: Iterable[Transaction],
    lookback_months: int,
    now: Optional[datetime] = None,
) -> List[Transaction]:
    """Transactions dated on or after ``now`` minus ``lookback_months`` calendar months"""
    now = to_wall_clock(now or datetime.now())
    start = add_months(now, -lookback_months)
    return [t for t in transactions if t.date >= start]


def build_series(category: str, transactions: List[Transaction]) -> MonthlySeries:
    totals = monthly_totals(transactions)
    values = list(totals.values())
    return MonthlySeries(
        category=category,
        transactions=transactions,
        totals_by_month=totals,
        values=values,
        average=mean(values),
    )


def aggregate_by_category(
    transactions: Iterable[Transaction],
    lookback_months: int,
    now: Optional[datetime] = None,
    min_samples: int = 0,
) -> Dict[str, MonthlySeries]:
    """
    Build a monthly series per category over the lookback window.

    The series keeps only months that have transactions, so a gap month does
    not appear as a zero entry and the index compresses over it.

    Args:
        transactions: Transactions of any type; callers pre-filter by type
        lookback_months: Window length measured back from ``now``
        now: Reference time (defaults to the current time)
        min_samples: Categories with fewer in-window transactions are dropped

    Returns:
        Mapping of category to its MonthlySeries, in first-seen category order
    """
    recent = within_window(transactions, lookback_months, now)
    series = {}
    for category, txns in group_by_category(recent).items():
        if len(txns) < min_samples:
            continue
        series[category] = build_series(category, txns)
    return series

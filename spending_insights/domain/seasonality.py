"""Per-calendar-month seasonal factors"""

from typing import List, Sequence

from spending_insights.domain.models import Transaction
from spending_insights.domain.stats import mean, safe_divide


def calculate_seasonal_factors(transactions: Sequence[Transaction]) -> List[float]:
    """
    Multiplicative factor for each calendar month (index 0 = January).

    Factor = mean transaction amount in that month / overall mean transaction
    amount. Months without data, and any input whose overall mean is zero,
    get the neutral factor 1.0.
    """
    amounts_by_month: List[List[float]] = [[] for _ in range(12)]
    for txn in transactions:
        amounts_by_month[txn.date.month - 1].append(txn.amount)

    overall = mean([t.amount for t in transactions])

    return [
        safe_divide(mean(amounts), overall, fallback=1.0) if amounts else 1.0
        for amounts in amounts_by_month
    ]

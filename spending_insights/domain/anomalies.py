"""Statistical anomaly detection over transaction history"""

import logging
import uuid
from typing import List, Sequence

from spending_insights.domain.models import (
    AnomalySeverity,
    AnomalyType,
    Transaction,
    TransactionAnomaly,
)
from spending_insights.domain.stats import mean, std_dev, z_score
from spending_insights.domain.timeseries import group_by_category, group_by_month

logger = logging.getLogger(__name__)

MIN_TRANSACTIONS = 10

AMOUNT_Z_THRESHOLD = 3.0
AMOUNT_Z_HIGH = 4.0
FREQUENCY_Z_THRESHOLD = 2.5
LARGE_NIGHT_AMOUNT = 500.0
NIGHT_START_HOUR = 23
NIGHT_END_HOUR = 5
DUPLICATE_WINDOW_SECONDS = 3600

_ANOMALY_NAMESPACE = uuid.UUID("6f1c2a9e-4b7d-5e38-9a0f-3c2d1e4b5a60")


def _anomaly(
    transaction: Transaction,
    anomaly_type: AnomalyType,
    severity: AnomalySeverity,
    z: float,
    expected_range: tuple,
    explanation: str,
) -> TransactionAnomaly:
    anomaly_id = uuid.uuid5(_ANOMALY_NAMESPACE, f"{anomaly_type.value}:{transaction.id}")
    return TransactionAnomaly(
        id=str(anomaly_id),
        transaction=transaction,
        anomaly_type=anomaly_type,
        severity=severity,
        z_score=z,
        expected_range=expected_range,
        explanation=explanation,
    )


def detect_amount_outliers(transactions: Sequence[Transaction]) -> List[TransactionAnomaly]:
    """Flag amounts more than 3 standard deviations from their category mean"""
    amounts = [t.amount for t in transactions]
    avg = mean(amounts)
    deviation = std_dev(amounts)

    anomalies = []
    for txn in transactions:
        z = z_score(txn.amount, avg, deviation)
        if z > AMOUNT_Z_THRESHOLD:
            severity = AnomalySeverity.HIGH if z > AMOUNT_Z_HIGH else AnomalySeverity.MEDIUM
            anomalies.append(
                _anomaly(
                    txn,
                    AnomalyType.UNUSUAL_AMOUNT,
                    severity,
                    z,
                    (avg - 2 * deviation, avg + 2 * deviation),
                    "ai.anomaly.unusual.amount",
                )
            )
    return anomalies


def detect_frequency_spikes(transactions: Sequence[Transaction]) -> List[TransactionAnomaly]:
    """Flag months whose transaction count spikes above the category's usual count"""
    by_month = group_by_month(transactions)
    if len(by_month) < 2:
        return []

    counts = [len(txns) for txns in by_month.values()]
    avg = mean(counts)
    deviation = std_dev(counts)

    anomalies = []
    for month_txns in by_month.values():
        count = len(month_txns)
        z = z_score(count, avg, deviation)
        # Troughs are not interesting, only spikes
        if z > FREQUENCY_Z_THRESHOLD and count > avg:
            most_recent = max(month_txns, key=lambda t: t.date)
            anomalies.append(
                _anomaly(
                    most_recent,
                    AnomalyType.FREQUENCY_SPIKE,
                    AnomalySeverity.MEDIUM,
                    z,
                    (avg - deviation, avg + deviation),
                    "ai.anomaly.frequency.spike",
                )
            )
    return anomalies


def detect_timing_anomalies(
    transactions: Sequence[Transaction],
    large_amount: float = LARGE_NIGHT_AMOUNT,
) -> List[TransactionAnomaly]:
    """Flag large transactions made between 23:00 and 05:59 local time"""
    return [
        _anomaly(
            txn,
            AnomalyType.UNUSUAL_TIMING,
            AnomalySeverity.LOW,
            0.0,
            (0.0, 0.0),
            "ai.anomaly.unusual.timing",
        )
        for txn in transactions
        if (txn.date.hour >= NIGHT_START_HOUR or txn.date.hour <= NIGHT_END_HOUR)
        and txn.amount > large_amount
    ]


def detect_potential_duplicates(transactions: Sequence[Transaction]) -> List[TransactionAnomaly]:
    """Flag the later of two chronologically adjacent transactions with equal amount and category"""
    ordered = sorted(transactions, key=lambda t: t.date)

    anomalies = []
    for current, following in zip(ordered, ordered[1:]):
        gap = abs((following.date - current.date).total_seconds())
        if (
            current.amount == following.amount
            and current.category == following.category
            and gap < DUPLICATE_WINDOW_SECONDS
        ):
            anomalies.append(
                _anomaly(
                    following,
                    AnomalyType.POTENTIAL_DUPLICATE,
                    AnomalySeverity.MEDIUM,
                    0.0,
                    (0.0, 0.0),
                    "ai.anomaly.potential.duplicate",
                )
            )
    return anomalies


def detect_anomalies(
    transactions: Sequence[Transaction],
    min_transactions: int = MIN_TRANSACTIONS,
    large_night_amount: float = LARGE_NIGHT_AMOUNT,
) -> List[TransactionAnomaly]:
    """
    Run every anomaly check and merge the results.

    Requirements:
    - At least ``min_transactions`` transactions, otherwise nothing is flagged
    - Amount and frequency checks run per category; timing and duplicate
      checks run over the whole history
    - Results ordered high > medium > low, ties kept in detection order
    """
    if len(transactions) < min_transactions:
        logger.debug("Skipping anomaly detection: %d transactions", len(transactions))
        return []

    anomalies: List[TransactionAnomaly] = []
    for category_txns in group_by_category(transactions).values():
        anomalies.extend(detect_amount_outliers(category_txns))
        anomalies.extend(detect_frequency_spikes(category_txns))

    anomalies.extend(detect_timing_anomalies(transactions, large_night_amount))
    anomalies.extend(detect_potential_duplicates(transactions))

    return sorted(anomalies, key=lambda a: a.severity.rank, reverse=True)

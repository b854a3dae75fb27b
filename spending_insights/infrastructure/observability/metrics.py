"""Prometheus metrics for monitoring analytics volume, latency and findings"""

from typing import Sequence

from prometheus_client import Counter, Histogram

from spending_insights.domain.models import FinancialInsight, PersonalizedAdvice, TransactionAnomaly

# Operation metrics
analysis_counter = Counter(
    "insights_analysis_total",
    "Analytics operations executed",
    ["operation"],  # predict_expenses | detect_anomalies | ...
)

analysis_duration_histogram = Histogram(
    "insights_analysis_duration_seconds",
    "Analytics operation latency",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Findings
anomaly_counter = Counter(
    "insights_anomalies_total",
    "Anomalies flagged",
    ["type", "severity"],
)

advice_counter = Counter(
    "insights_advice_total",
    "Advice items produced",
    ["priority"],  # low | medium | high | critical
)

insight_counter = Counter(
    "insights_generated_total",
    "Dashboard insights produced",
    ["type", "priority"],
)


def record_analysis(operation: str, duration_seconds: float) -> None:
    analysis_counter.labels(operation=operation).inc()
    analysis_duration_histogram.labels(operation=operation).observe(duration_seconds)


def record_anomalies(anomalies: Sequence[TransactionAnomaly]) -> None:
    """Count flagged anomalies by type and severity"""
    for anomaly in anomalies:
        anomaly_counter.labels(type=anomaly.anomaly_type.value, severity=anomaly.severity.value).inc()


def record_advice(advice: Sequence[PersonalizedAdvice]) -> None:
    for item in advice:
        advice_counter.labels(priority=item.priority.value).inc()


def record_insights(insights: Sequence[FinancialInsight]) -> None:
    for insight in insights:
        insight_counter.labels(type=insight.type.value, priority=insight.priority.value).inc()

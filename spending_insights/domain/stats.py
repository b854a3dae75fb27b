"""Descriptive statistics shared by the analytics modules.

All helpers are total: empty input, zero variance and zero means resolve to a
documented fallback instead of raising or producing NaN.
"""

import math
from typing import Sequence

import numpy as np


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """Divide, returning ``fallback`` when the denominator is zero or the result is not finite"""
    if denominator == 0:
        return fallback
    result = numerator / denominator
    return result if math.isfinite(result) else fallback


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation"""
    if len(values) == 0:
        return 0.0
    return float(np.std(values))


def coefficient_of_variation(values: Sequence[float], non_positive_mean: float = 1.0) -> float:
    """
    Standard deviation over mean.

    ``non_positive_mean`` is returned when the mean is zero or negative, since
    relative dispersion is undefined there.
    """
    avg = mean(values)
    if avg <= 0:
        return non_positive_mean
    return std_dev(values) / avg


def consistency_confidence(values: Sequence[float]) -> float:
    """Lower dispersion means higher confidence: clamp(1 - CoV, 0, 1), 0 for no data"""
    if len(values) == 0:
        return 0.0
    return clamp(1.0 - coefficient_of_variation(values))


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.median(values))


def percentile(values: Sequence[float], fraction: float) -> float:
    """Nearest-rank percentile: sorted[floor((n - 1) * fraction)]"""
    if len(values) == 0:
        return 0.0
    ordered = sorted(values)
    return float(ordered[int((len(ordered) - 1) * fraction)])


def z_score(value: float, avg: float, deviation: float) -> float:
    """Absolute distance from the mean in standard deviations; 0 when there is no spread"""
    return abs(value - avg) / deviation if deviation > 0 else 0.0

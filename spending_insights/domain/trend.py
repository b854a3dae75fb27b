"""Linear trend estimation over monthly totals"""

from typing import Sequence

import numpy as np


def calculate_trend_slope(values: Sequence[float]) -> float:
    """
    Ordinary least squares slope of value against list position.

    The index stands in for time, so a series with a missing month is treated
    as if its months were adjacent.

    Returns 0.0 for fewer than two points.
    """
    n = len(values)
    if n < 2:
        return 0.0

    x = np.arange(n, dtype=float)
    y = np.asarray(values, dtype=float)

    denominator = n * np.sum(x * x) - np.sum(x) ** 2
    slope = (n * np.sum(x * y) - np.sum(x) * np.sum(y)) / denominator
    return float(slope)

"""Unit tests for trend slope estimation"""

import pytest

from spending_insights.domain.trend import calculate_trend_slope


def test_increasing_series_has_positive_slope():
    assert calculate_trend_slope([100, 200, 300, 400]) == pytest.approx(100.0)


def test_decreasing_series_has_negative_slope():
    # n=4, Σx=6, Σx²=14, Σy=810, Σxy=530 -> (2120 - 4860) / 20
    assert calculate_trend_slope([400, 300, 100, 10]) == pytest.approx(-137.0)


def test_flat_series_has_zero_slope():
    assert calculate_trend_slope([250, 250, 250]) == pytest.approx(0.0)


def test_too_few_points():
    """Test fewer than two points gives no trend"""
    assert calculate_trend_slope([]) == 0.0
    assert calculate_trend_slope([500]) == 0.0

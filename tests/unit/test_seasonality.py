"""Unit tests for seasonal factors"""

from datetime import datetime

import pytest

from spending_insights.domain.seasonality import calculate_seasonal_factors


def test_uniform_year_is_neutral(make_transaction):
    """Test equal spending in every calendar month yields factor 1.0 everywhere"""
    transactions = [make_transaction(150, datetime(2023, month, 10)) for month in range(1, 13)]

    factors = calculate_seasonal_factors(transactions)

    assert len(factors) == 12
    assert factors == pytest.approx([1.0] * 12)


def test_months_without_data_default_to_neutral(make_transaction):
    """Test factors relative to overall mean, missing months left at 1.0"""
    transactions = [
        make_transaction(100, datetime(2024, 1, 10)),
        make_transaction(300, datetime(2024, 2, 10)),
    ]

    factors = calculate_seasonal_factors(transactions)

    # Overall mean 200: January 100/200, February 300/200
    assert factors[0] == pytest.approx(0.5)
    assert factors[1] == pytest.approx(1.5)
    assert factors[2:] == [1.0] * 10


def test_zero_mean_is_neutral(make_transaction):
    """Test all-zero amounts do not divide by zero"""
    transactions = [make_transaction(0, datetime(2024, 3, 1)), make_transaction(0, datetime(2024, 4, 1))]

    assert calculate_seasonal_factors(transactions) == [1.0] * 12
    assert calculate_seasonal_factors([]) == [1.0] * 12


def test_factor_uses_transaction_means_not_totals(make_transaction):
    """Test many small purchases in a month do not inflate its factor"""
    transactions = [
        make_transaction(50, datetime(2024, 5, 1)),
        make_transaction(50, datetime(2024, 5, 2)),
        make_transaction(50, datetime(2024, 5, 3)),
        make_transaction(50, datetime(2024, 6, 1)),
    ]

    factors = calculate_seasonal_factors(transactions)

    assert factors[4] == pytest.approx(1.0)
    assert factors[5] == pytest.approx(1.0)

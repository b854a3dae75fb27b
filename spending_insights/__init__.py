"""
Spending insights - forecasting, anomaly detection, budget suggestions and advice
"""

from .service import FinancialAnalyticsService, create_service

__all__ = [
    'FinancialAnalyticsService',
    'create_service',
]

__version__ = '0.1.0'

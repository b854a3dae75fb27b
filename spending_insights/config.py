"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analytics configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "spending-insights"
    log_level: str = "INFO"

    # Expense forecasting
    prediction_lookback_months: int = 6
    prediction_min_transactions: int = 3

    # Anomaly detection
    anomaly_min_transactions: int = 10
    large_night_amount: float = 500.0

    # Budget suggestions
    budget_lookback_months: int = 3

    # Advice
    subscription_alert_threshold: float = 500.0  # Recurring monthly total worth reviewing


settings = Settings()

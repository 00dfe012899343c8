"""
Application configuration using Pydantic BaseSettings.
Loads environment variables and provides typed configuration.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project metadata
    PROJECT_NAME: str = "OOH Billing Pricing Service"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60

    # Booking defaults
    DEFAULT_BOOKED_DAYS: int = 30
    DEFAULT_BILLING_MODE: str = "PRORATA_30"
    MAX_BILLING_PERIODS: int = 120
    CURRENCY_SYMBOL: str = "₹"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

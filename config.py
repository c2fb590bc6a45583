"""
Configuration management for MedTracker
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MedTracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Database (Postgres-compatible store with row-level security in production)
    DATABASE_URL: str = "sqlite:///./medtracker.db"
    DATABASE_ECHO: bool = False

    # External auth platform (GoTrue-compatible REST API)
    AUTH_URL: str = "http://localhost:54321"
    AUTH_ANON_KEY: Optional[str] = None
    AUTH_TIMEOUT_SECONDS: float = 10.0
    PASSWORD_RESET_REDIRECT_URL: Optional[str] = None

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Medicine logs closer together than this are rejected as duplicates
    DUPLICATE_LOG_WINDOW_MINUTES: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class EngineConfig:
    """Constants for the scheduling and analytics engine"""

    # Medicine
    NAME_MAX_LENGTH: int = 100
    DOSE_MAX_LENGTH: int = 50
    TEXT_MAX_LENGTH: int = 500
    INTERVAL_MINUTES_MAX: int = 43200  # 30 days
    MEAL_TIMING_MAX: int = 5

    # Medicine logs
    DOSAGE_TAKEN_MAX_LENGTH: int = 100
    LOG_MAX_AGE_DAYS: int = 365
    DUPLICATE_LOG_WINDOW_MINUTES: int = 5

    # Adherence
    MEAL_BASED_DOSES_PER_DAY: int = 3

    # Weights
    WEIGHT_MAX: float = 1000.0
    WEIGHT_EARLIEST_YEAR: int = 1900
    KG_TO_LBS: float = 2.20462
    LBS_TO_KG: float = 0.453592
    TREND_STABLE_THRESHOLD: float = 0.5

    # Analytics periods (days back from now)
    PERIOD_DAYS: dict[str, int] = {
        "week": 7,
        "month": 30,
        "3months": 90,
        "6months": 180,
        "year": 365,
    }
    ADHERENCE_DEFAULT_PERIOD: str = "week"
    TRENDS_DEFAULT_PERIOD: str = "month"


# Database table names
class TableNames:
    MEDICINES = "medicines"
    MEDICINE_LOGS = "medicine_logs"
    WEIGHT_LOGS = "weight_logs"


settings = get_settings()
engine_config = EngineConfig()

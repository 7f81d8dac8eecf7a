"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the API and the sync worker.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Database configuration
    DATABASE_URL: str = "sqlite:///./leadsync.db"

    # Redis (cross-process sync lock)
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_SSL: bool = False
    SYNC_LOCK_KEY: str = "leadsync:sync-run"
    SYNC_LOCK_TTL_SECONDS: int = 3600

    # Reporting API
    REPORT_API_BASE_URL: str = "https://rentalapi.rootments.live"
    REPORT_API_TOKEN: Optional[str] = None
    REPORT_API_TIMEOUT_SECONDS: int = 30
    BOOKING_API_ENDPOINT: str = "/api/Reports/GetBookingReport"
    RENTOUT_API_ENDPOINT: str = "/api/Reports/GetBookingReport"
    RETURN_API_ENDPOINT: str = "/api/Reports/GetReturnReport"
    STORE_LIST_API_ENDPOINT: str = "/api/Location/LocationList"

    # Sync window and pacing
    SYNC_DATE_FROM: Optional[str] = None
    SYNC_DATE_TO: Optional[str] = None
    SYNC_MONTHS: Optional[int] = None
    SYNC_DEFAULT_MONTHS: int = 12
    SYNC_REQUEST_PAUSE_SECONDS: float = 0.5
    SYNC_INTERVAL_SECONDS: int = 600
    SYNC_ENABLED: bool = True
    SYNC_SAMPLE_LIMIT: int = 20

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()

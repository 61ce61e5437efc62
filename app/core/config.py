"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using a mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/meter_readings.db"
    return "sqlite:///./meter_readings.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Meter Reading Upload"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database - defaults to volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()
    CREATE_TABLES_ON_STARTUP: bool = True

    # Accounts CSV (AccountId,FirstName,LastName) loaded at startup when present
    SEED_ACCOUNTS_FILE: str = "data/test_accounts.csv"

    # Uploads
    CSV_ENCODING: str = "utf-8-sig"
    ACCEPTED_UPLOAD_CONTENT_TYPES: list[str] = [
        "text/csv",
        "application/vnd.ms-excel",
        "application/csv",
    ]
    DISCONNECT_POLL_INTERVAL_SECONDS: float = 0.5


settings = Settings()

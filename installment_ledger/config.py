"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./installment_ledger.db"

    # Service
    service_name: str = "installment-ledger"
    log_level: str = "INFO"

    # Ledger
    default_currency: str = "TRY"
    schedule_months: int = 12  # Default look-ahead for the schedule endpoint


settings = Settings()

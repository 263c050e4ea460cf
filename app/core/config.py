## app/core/config.py

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the application
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", case_sensitive=False
    )

    environment: str = "development"
    allowed_cors_urls: str = "http://localhost:3000"

    db_host: Optional[str] = None
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    db_database: Optional[str] = None
    db_port: int = 3306
    sqlite_file: str = "agency.db"

    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    admin_api_key: str = "change-me-admin-key"

    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    # Billing defaults for a fresh bill form
    default_rate_per_km: Decimal = Decimal("15")
    default_driver_allowance: Decimal = Decimal("300")
    default_gst_enabled: bool = True
    default_gst_percent: Decimal = Decimal("5")

    revenue_series_size: int = 10
    dashboard_recent_limit: int = 5
    trip_id_attempts: int = 5

    # Letterhead used on invoices when the agency profile has no address
    invoice_footer: str = "Thank you for travelling with us."
    invoice_default_address: str = ""
    invoice_currency_label: str = "INR"

    @property
    def is_sqlite(self) -> bool:
        """
        Whether the local SQLite fallback is in use
        """
        return not self.db_host

    @property
    def async_db_url(self) -> str:
        """
        Async database URL
        """
        if self.is_sqlite:
            return f"sqlite+aiosqlite:///{self.sqlite_file}"
        return f"mysql+asyncmy://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_database}"


settings = Settings()

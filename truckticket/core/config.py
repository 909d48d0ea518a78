from decimal import Decimal
from functools import lru_cache
import os
from typing import List, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    debug: bool = False
    project_name: str = "Truck Ticket API"
    environment: str = "development"
    log_level: str = "INFO"

    # Raw CORS origins string - read from env
    cors_origins_raw: Optional[str] = Field(
        default=None,
        alias="CORS_ORIGINS"
    )

    @computed_field
    @property
    def backend_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from environment variable (comma-separated string)."""
        raw = self.cors_origins_raw
        if not raw:
            raw = os.environ.get("CORS_ORIGINS") or ""

        if not raw.strip():
            return []

        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    database_url: str  # Required - no default, must be set in .env

    # Connection pool (ignored for SQLite URLs)
    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_timeout: int = 10
    db_connect_timeout: int = 10

    # Billing
    # GST surcharge applied once to the invoice subtotal
    invoice_gst_rate: Decimal = Decimal("0.05")

    # Driver accounts
    bcrypt_rounds: int = 12
    driver_email_domain: str = "trucking.com"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

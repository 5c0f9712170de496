"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional, Union
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from pathlib import Path

# Get the base directory
BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INVOICING_",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO")

    # API Configuration
    api_title: str = Field(default="Invoicing Document Engine")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Storage: "memory" keeps documents in process, "sql" uses database_url
    storage_backend: str = Field(default="memory", pattern="^(memory|sql)$")
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'invoicing.db'}",
        description="SQLAlchemy database URL"
    )

    # CORS
    cors_origins: Union[str, List[str]] = Field(
        default=",".join(DEFAULT_CORS_ORIGINS),
        validate_default=True
    )

    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)

    # Invoices
    default_currency: str = Field(default="EUR")
    invoice_number_prefix: str = Field(default="INV")
    strict_catalog_references: bool = Field(
        default=False,
        description="Reject line items whose tax rate or discount id does not resolve"
    )

    # Payment links
    payment_link_provider: str = Field(default="simulated", pattern="^(simulated|http)$")
    payment_link_api_url: Optional[str] = Field(default=None, description="Payments API base URL")
    payment_link_api_key: Optional[str] = Field(default=None)
    payment_link_base_url: str = Field(default="https://pay.globapay.com")
    payment_link_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if v is None:
            return list(DEFAULT_CORS_ORIGINS)
        if isinstance(v, str):
            if not v.strip():
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("default_currency")
    @classmethod
    def normalise_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    def validate_environment(self) -> None:
        """Validate that production settings are complete."""
        missing_vars = []
        if self.payment_link_provider == "http":
            if not self.payment_link_api_url:
                missing_vars.append("INVOICING_PAYMENT_LINK_API_URL")
            if not self.payment_link_api_key:
                missing_vars.append("INVOICING_PAYMENT_LINK_API_KEY")

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    if settings.is_production:
        settings.validate_environment()

    return settings

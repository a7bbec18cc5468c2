"""
Configuration settings for the Car Rental API.
Uses Pydantic for type-safe configuration management.
"""
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class PromoSetting(BaseModel):
    """A promo entry as configured (expiry is a dd/mm/yyyy string)."""
    title: str
    discount: int
    expired_date: str


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Car Rental API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://carrental:carrental@db:5432/carrental"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    default_role: str = "customer"

    # Federated sign-in
    google_client_id: Optional[str] = None
    google_tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"
    google_timeout_seconds: float = 10.0

    # Pricing
    promos: list[PromoSetting] = [
        PromoSetting(title="NEWUSER", discount=25, expired_date="25/11/2024"),
        PromoSetting(title="SEWASUKASUKA", discount=15, expired_date="20/11/2024"),
    ]

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # API
    api_v1_prefix: str = "/api/v1"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

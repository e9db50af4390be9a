"""
Esttetica Application Configuration
Loads settings from .env file using Pydantic v2 with BaseSettings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "Esttetica API"
    PROJECT_DESCRIPTION: str = "Subscription, billing and entitlement services for the Esttetica clinic app"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # ==================== Database ====================
    # Supabase Postgres in production, local SQLite for development
    DATABASE_URL: str = "sqlite:///esttetica_local.db"
    DATABASE_POOL_RECYCLE: int = 3600

    # ==================== Supabase (identity provider) ====================
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # ==================== Stripe (payment provider) ====================
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_API_VERSION: str = "2023-10-16"
    STRIPE_PRICE_DAILY: str = "price_1SAFNkBe0ycHroRBidLX2jgZ"
    STRIPE_PRICE_MONTHLY: str = "price_1S9YdXBe0ycHroRB9sDH7MJO"
    STRIPE_PRICE_YEARLY: str = "price_1S9YdXBe0ycHroRBqz8Yr30h"

    # ==================== CORS & Frontend ====================
    FRONTEND_URL: str = "http://localhost:5173"
    ALLOWED_ORIGINS: List[str] = ["*"]

    # ==================== Entitlement ====================
    PREMIUM_FALLBACK_PATH: str = "/dashboard"

    # ==================== Cancellations ====================
    CANCELLATION_GRACE_DAYS: int = 14
    REFUND_WINDOW_DAYS: int = 14

    # ==================== Help & Contact ====================
    WHATSAPP_NUMBER: str = "5511999999999"
    CONTACT_EMAIL: str = "contato@estettica.com"

    # ==================== Features ====================
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ==================== Configuration Loading ====================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",  # Allow extra environment variables
        validate_default=True,
    )

    # ==================== Properties ====================
    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT == "production"

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


# ==================== Settings Singleton ====================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Create default settings instance
settings = get_settings()


# ==================== Helper Functions ====================
def get_cors_origins() -> List[str]:
    """Get CORS allowed origins"""
    return settings.ALLOWED_ORIGINS

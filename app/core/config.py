from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === PUBLIC DATA (not secrets) ===
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Property Listing Service"

    # === DATABASE SETTINGS (from .env) ===
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017/property_listings",
        description="MongoDB connection string (must include the database name)",
    )

    # === APPLICATION SETTINGS ===
    LOG_LEVEL: str = Field(default="INFO")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)
    CORS_ORIGINS: str = Field(default="", description="Allowed CORS origins (comma-separated). Empty = no CORS.")

    # === SECRETS (from .env) ===
    SECRET_KEY: str = Field(..., description="Secret key for JWT tokens")

    # === MAIL SETTINGS (from .env) ===
    SMTP_HOST: Optional[str] = Field(default=None, description="SMTP server host. Empty = mail disabled")
    SMTP_PORT: int = Field(default=587)
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_USE_TLS: bool = Field(default=True)
    MAIL_FROM: str = Field(default="no-reply@example.com", description="Sender address for notifications")

    # === PAYMENT SETTINGS (from .env) ===
    PAYMENT_API_BASE: str = Field(default="https://api.stripe.com/v1", description="Checkout provider API base URL")
    PAYMENT_SECRET_KEY: Optional[str] = Field(default=None, description="Checkout provider secret API key")
    PAYMENT_WEBHOOK_SECRET: Optional[str] = Field(default=None, description="Signing secret for provider webhooks")
    PAYMENT_CURRENCY: str = Field(default="INR")

    # Applies to every outbound call (payment provider, SMTP)
    EXTERNAL_CALL_TIMEOUT: float = Field(default=10.0, description="Timeout in seconds for third-party calls")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get allowed CORS origins as a list"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

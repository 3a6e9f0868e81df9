"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.

SMTP settings are optional. When any of host, port, user or
password is missing the email dispatcher stays disabled and
the rest of the application behaves exactly the same.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "GRC Back Office"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = _flag("DEBUG", "false")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/grc_platform"
    )
    SEED_ON_STARTUP: bool = _flag("SEED_ON_STARTUP", "true")

    # Authentication
    JWT_SECRET: str = os.getenv("JWT_SECRET", "test-secret")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRY_DAYS: int = int(os.getenv("JWT_EXPIRY_DAYS", "7"))
    EXTERNAL_API_KEY: str = os.getenv("EXTERNAL_API_KEY", "test-api-key")

    # Email (optional)
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: str = os.getenv("SMTP_PORT", "")
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", "")
    SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "GRC Compliance Platform")
    SMTP_USE_TLS: bool = _flag("SMTP_USE_TLS", "true")
    SMTP_TIMEOUT: int = int(os.getenv("SMTP_TIMEOUT", "30"))
    FRONTEND_BASE_URL: str = os.getenv(
        "FRONTEND_BASE_URL", "https://compliance.yourcompany.com"
    )

    # Scheduler
    SCHEDULER_ENABLED: bool = _flag("SCHEDULER_ENABLED", "true")
    SCHEDULER_POLL_SECONDS: int = int(os.getenv("SCHEDULER_POLL_SECONDS", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "")

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting '{key}'")
            setattr(self, key, value)


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()

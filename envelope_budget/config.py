"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Envelope Budget"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = _flag("DEBUG")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./envelope_budget.db"
    )
    # Upper bound for a single statement / lock wait, in seconds
    DB_TIMEOUT_SECONDS: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))
    AUTO_CREATE_TABLES: bool = _flag("AUTO_CREATE_TABLES", "true")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON: bool = _flag("LOG_JSON")

    # Budget
    AVAILABLE_ENVELOPE_NAME: str = os.getenv(
        "AVAILABLE_ENVELOPE_NAME", "✉️ Available"
    )
    SEED_ENVELOPES: list[str] = [
        name.strip()
        for name in os.getenv("SEED_ENVELOPES", "🍞 Groceries").split(",")
        if name.strip()
    ]
    AVAILABLE_EXCLUDES_BOUND_INFLOWS: bool = _flag(
        "AVAILABLE_EXCLUDES_BOUND_INFLOWS"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()

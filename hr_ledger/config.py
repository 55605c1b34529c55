"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.

Settings are validated once when the application is built
(see main.create_app), so a bad value stops the process at
boot instead of failing on the first request.
"""

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from hr_ledger.exceptions import ConfigurationError

# Load .env file into environment variables
load_dotenv()


POSTER_MODES = ("auto", "atomic", "sequential")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "HR Ledger Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./hr_ledger.db"
    )

    # Posting strategy: "auto" probes the database at startup
    POSTER_MODE: str = os.getenv("POSTER_MODE", "auto").lower()

    # Pagination for transaction listings
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "500"))

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> "Settings":
        """
        Check every setting and raise ConfigurationError on the first
        problem found. Returns self so it can be chained.
        """
        if not self.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is not set")
        try:
            make_url(self.DATABASE_URL)
        except ArgumentError as e:
            raise ConfigurationError(
                f"DATABASE_URL is not a valid database URL: {e}"
            ) from e

        if self.POSTER_MODE not in POSTER_MODES:
            raise ConfigurationError(
                f"POSTER_MODE must be one of {', '.join(POSTER_MODES)}, "
                f"got '{self.POSTER_MODE}'"
            )

        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise ConfigurationError(f"Unknown LOG_LEVEL '{self.LOG_LEVEL}'")

        if self.DEFAULT_PAGE_SIZE < 1 or self.MAX_PAGE_SIZE < 1:
            raise ConfigurationError("Page sizes must be positive")
        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ConfigurationError(
                "DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE"
            )

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()

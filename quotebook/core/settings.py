# quotebook/core/settings.py
import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === General ===
    app_env: str = "local"  # local | development | production
    COMPANY_NAME: str = "MAS Developers"
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    # === Database ===
    DATABASE_URL: str = "sqlite:///./quotebook.db"
    SQLITE_BUSY_TIMEOUT: float = Field(30.0, description="Seconds a writer waits for the SQLite lock")

    # === Auth ===
    JWT_SECRET: str = "change-me"
    JWT_EXP_HOURS: int = 24
    COOKIE_SECURE: bool = False

    # === Default account (seeded explicitly at startup / via scripts/seed_admin.py) ===
    SEED_DEFAULT_ADMIN: bool = True
    DEFAULT_ADMIN_USERNAME: str = "Admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin"
    DEFAULT_ADMIN_NAME: str = "Administrator"
    DEFAULT_ADMIN_EMAIL: Optional[str] = "admin@masdevelopers.in"

    # === Quotations ===
    TIMEZONE: str = Field("Asia/Kolkata", description="Calendar used for numbering years and document dates")
    NUMBERING_MAX_ATTEMPTS: int = 5
    QUOTATION_VALIDITY_DAYS: int = 30

    # === Rate limiting ===
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_QUOTE_CREATE: str = "60/minute"

    # === Logging ===
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance with simple env overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.LOG_LEVEL = "WARNING"
    elif env == "development":
        s.LOG_LEVEL = "DEBUG"

    return s


settings = get_settings()

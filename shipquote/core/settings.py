# shipquote/core/settings.py
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RATE_GRID_PATH = str(Path(__file__).resolve().parents[1] / "data" / "rate_grid.json")

# Stored distribution lists always live for 2h
DISTRIBUTION_TTL_SECONDS = 7200


class Settings(BaseSettings):
    app_env: str = "local"  # local | development | production

    # === Redis ===
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 2.0

    # === Rate grid ===
    RATE_GRID_PATH: str = Field(DEFAULT_RATE_GRID_PATH, description="JSON/YAML rule source")
    DEFAULT_CARRIER: str = "DHL"
    POSTAL_PREFIX_LENGTH: int = Field(2, ge=0)
    NO_RATE_POLICY: Literal["zero_with_warning", "fail"] = "zero_with_warning"

    # === Storefront envelope ===
    CURRENCY_CODE: str = "EUR"
    DAYS_TO_DELIVER: int = 2
    SERVICE_CODE: str = "External"
    ALLOWED_ORIGINS: list[str] = ["https://decoration.ams.v6.pressero.com"]

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
    """Cached Settings instance; ENVIRONMENT adjusts the log level."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.LOG_LEVEL = "WARNING"
    elif env == "development":
        s.LOG_LEVEL = "DEBUG"

    return s


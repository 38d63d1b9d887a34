from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings loaded from environment with defaults.

    Environment variables use the ``ILP_PRICE_`` prefix (e.g. ILP_PRICE_DEBUG,
    ILP_PRICE_LANDMARKS_FILE, ILP_PRICE_PROBE_AMOUNT).
    """

    model_config = SettingsConfigDict(
        env_prefix="ILP_PRICE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic metadata
    app_name: str = "ILP Price"
    debug: bool = False
    version: str = "0.1.0"

    # Landmark overrides, layered on top of the built-in defaults
    landmarks_file: Optional[Path] = None
    landmarks: Optional[str] = None  # inline JSON

    # Quoting
    probe_amount: str = "1000"

    # Landmark HTTP lookups
    http_timeout_seconds: float = 5.0
    http_retries: int = 2

    @field_validator("probe_amount")
    @classmethod
    def positive_probe(cls, v: str) -> str:
        try:
            value = Decimal(v)
        except InvalidOperation as e:
            raise ValueError("probe_amount must be a decimal string") from e
        if not value.is_finite() or value <= 0:
            raise ValueError("probe_amount must be positive")
        return v

    @field_validator("http_retries")
    @classmethod
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retries must be >= 0")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()

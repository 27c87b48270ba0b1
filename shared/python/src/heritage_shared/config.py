"""
config.py — pydantic-settings Settings class.

All environment variables for the heritage platform are declared here.
Both the pipeline and API import `settings` from this module.

Usage:
    from heritage_shared.config import settings
    print(settings.supabase_url)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production"] = Field(default="development")

    # -------------------------------------------------------------------------
    # Supabase
    # -------------------------------------------------------------------------
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_anon_key: str = Field(default="")
    supabase_service_key: str = Field(default="")

    # -------------------------------------------------------------------------
    # Data sources
    # -------------------------------------------------------------------------
    datagov_api_base: str = Field(default="https://data.gov.tw/api/v2/rest/dataset")
    taipei_api_base: str = Field(default="https://data.taipei/api/v1/dataset")
    http_timeout: float = Field(default=60.0)
    http_max_attempts: int = Field(default=3)
    taipei_page_size: int = Field(default=1000)
    taipei_max_records: int = Field(default=100_000)
    sync_batch_size: int = Field(default=100)

    # -------------------------------------------------------------------------
    # Geocoding (optional enrichment)
    # -------------------------------------------------------------------------
    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org/search")
    contact_email: str = Field(default="heritage-hunter@example.com")
    geocode_interval_s: float = Field(default=1.0)

    # -------------------------------------------------------------------------
    # API server / sync triggers
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:3000")
    cron_secret: str = Field(default="")
    admin_api_key: str = Field(default="")
    health_check_ttl_s: float = Field(default=60.0)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @field_validator(
        "supabase_url", "datagov_api_base", "taipei_api_base", mode="before"
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton, import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()

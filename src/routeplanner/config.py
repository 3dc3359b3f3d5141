"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route Planner API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")

    average_speed_kmh: float = Field(
        default=50.0,
        gt=0.0,
        description="Average travel speed used to turn distances into durations.",
    )
    fuel_consumption_l_per_100km: float = Field(default=8.0, ge=0.0)
    fuel_price_per_l: float = Field(default=1.80, ge=0.0)
    hourly_rate: float = Field(default=30.0, ge=0.0)
    maintenance_rate_per_km: float = Field(default=0.05, ge=0.0)
    currency: str = Field(default="EUR", description="Currency reported alongside cost breakdowns.")

    geocoding_api_key: Optional[str] = Field(
        default=None,
        description="Google Geocoding API key. Geocoding is unavailable without it.",
    )
    geocoding_base_url: str = Field(default=GOOGLE_GEOCODE_URL)
    geocoding_region: Optional[str] = Field(
        default=None,
        description="Optional ccTLD region bias passed to the geocoder (e.g. 'fr').",
    )
    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoding_max_retries: int = Field(default=3, ge=0)
    geocoding_backoff_seconds: float = Field(default=1.0, ge=0.0)

    frequent_addresses_limit: int = Field(default=5, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


settings = Settings()

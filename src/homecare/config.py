"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="HC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Home Care Planning API"
    api_prefix: str = "/api"
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

    # Mapping service (Google Directions API)
    maps_api_key: Optional[str] = Field(
        default=None,
        description="API key for the directions service. Without it only local estimates are available.",
    )
    maps_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/directions/json",
        description="Directions endpoint returning JSON.",
    )
    maps_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)
    maps_max_retries: int = Field(default=1, ge=0)
    maps_backoff_seconds: float = Field(default=0.5, ge=0.0)
    maps_language: str = Field(default="es")

    default_city: str = Field(
        default="Mataró",
        description="City used when a stop carries no address information at all.",
    )
    default_country: str = Field(
        default="España",
        description="Country appended to addresses sent to the directions service.",
    )
    default_travel_mode: Literal["DRIVING", "WALKING", "TRANSIT"] = Field(default="DRIVING")

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
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


settings = Settings()

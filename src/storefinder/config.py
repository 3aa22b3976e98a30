"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFINDER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Store Finder API"
    api_prefix: str = "/api"
    catalog_source: Literal["rows", "fixture", "json-file", "api"] = Field(
        default="fixture",
        description="Where the store catalog is loaded from.",
    )
    catalog_file: Path = Field(
        default=Path("data/stores.csv"),
        description="Authored store rows (.csv or .xlsx) or a stores.json document.",
    )
    catalog_api_url: Optional[str] = Field(
        default=None,
        description="Remote endpoint returning {\"stores\": [...]} (catalog_source=api).",
    )
    max_results: int = Field(default=10, ge=1)
    auto_detect_location: bool = True
    fallback_center: tuple[float, float] = Field(
        default=(45.5231, -122.6765),
        description="Map center used when neither an anchor nor a store is available.",
    )
    geolocation_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim-compatible geocoding service.",
    )
    geocoder_user_agent: str = "StoreLocator/1.0"
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    suggestion_limit: int = Field(default=5, ge=1)
    suggestion_debounce_ms: int = Field(default=300, ge=0)
    suggestion_min_chars: int = Field(default=3, ge=1)
    status_window_minutes: int = Field(default=60, ge=1)
    session_header: str = "X-Session-Id"
    session_cookie: str = "storefinder_session"
    max_sessions: int = Field(default=1000, ge=1, description="Live search sessions kept in memory.")
    preferences_file: Path = Field(
        default=Path("data/preferences.json"),
        description="Durable key-value file backing user preferences.",
    )
    default_services: tuple[str, ...] = Field(
        default=("pharmacy", "pickup", "delivery", "24-hour", "deli", "bakery"),
        description="Service tags offered as filters when the catalog has none.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("catalog_file", "preferences_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", "default_services", mode="before")
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

    @field_validator("fallback_center", mode="before")
    @classmethod
    def _parse_center_from_env(cls, value: Any) -> tuple[float, float]:
        """Parse a "lat,lng" pair from environment variable (comma-separated or JSON array)."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = [item.strip() for item in value.split(",") if item.strip()]
            value = parsed
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        raise ValueError("fallback_center must be a latitude/longitude pair")


settings = Settings()

"""Application configuration and settings management."""

from pathlib import Path
from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDPLAN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Visit Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for exported plan runs.")
    log_level: str = Field(default="INFO", description="Root logging level applied by the app factory.")

    average_speed_kmh: float = Field(default=55.0, gt=0.0, description="Average driving speed for travel estimates.")
    day_start_minutes: int = Field(default=8 * 60, ge=0, lt=24 * 60, description="Clock value teams leave the depot.")
    default_window_start: str = Field(default="08:00", description="Window start used when a client has none.")
    default_window_end: str = Field(default="17:00", description="Window end used when a client has none.")
    default_service_minutes: int = Field(default=60, ge=1)
    feasibility_grace_minutes: int = Field(default=60, ge=0, description="Tolerance past a window end.")
    max_reschedule_options: int = Field(default=5, ge=1)
    include_return_in_totals: bool = Field(
        default=False,
        description="Add the final leg back to the depot to route totals.",
    )

    max_team_count: int = Field(default=50, ge=1)
    max_horizon_days: int = Field(default=366, ge=1)
    planning_max_workers: int = Field(default=1, ge=1, description="Threads used to plan independent dates.")

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

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


settings = Settings()

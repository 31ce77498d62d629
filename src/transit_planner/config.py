"""Application configuration and settings management."""

from pathlib import Path
from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSIT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Transit Network Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted snapshots.")
    snapshot_file: str = Field(default="network.json", description="File name of the network snapshot.")
    schedules_dirname: str = Field(default="schedules", description="Sub-directory holding per-line schedules.")

    snap_tolerance_m: float = Field(default=25.0, gt=0.0, description="Route vertices closer than this snap to a stop.")
    catchment_radius_m: float = Field(default=300.0, gt=0.0, description="Walkable radius served by a stop.")
    catchment_steps: int = Field(default=64, ge=8, description="Number of sides of the catchment polygon.")
    destination_threshold_m: float = Field(default=300.0, ge=0.0)
    coverage_noise_floor_percent: float = Field(default=0.1, ge=0.0)
    nearby_route_threshold_m: float = Field(default=30.0, ge=0.0)

    average_speed_kmh: float = Field(default=21.0, gt=0.0, description="Assumed commercial speed of every line.")
    break_minutes: float = Field(default=15.0, ge=0.0, description="Layover after each trip.")
    first_departure: str = Field(default="06:00", pattern=r"^\d{1,2}:\d{2}$")
    default_usage_percent: float = Field(default=5.0, ge=0.0, le=100.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:4200",
            "http://127.0.0.1:4200",
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

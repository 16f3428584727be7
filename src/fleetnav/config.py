"""Application configuration and settings management."""

from typing import Annotated, Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FLEETNAV_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Fleet Navigation API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Level applied to the fleetnav logger.")

    average_speed_mps: float = Field(
        default=8.33,
        gt=0.0,
        description="Average travel speed in meters per second (8.33 m/s is roughly 30 km/h).",
    )
    hospital_landmark: Annotated[tuple[float, float], NoDecode] = Field(
        default=(75.7804, 11.2588),
        description="Hospital landmark as (longitude, latitude); segments near it are emergency roads.",
    )
    hospital_radius_m: float = Field(default=500.0, ge=0.0)
    incident_radius_m: float = Field(default=200.0, ge=0.0)
    incident_penalty: float = Field(default=20.0, ge=0.0)
    road_work_radius_m: float = Field(default=100.0, ge=0.0)
    road_work_penalty: float = Field(default=10.0, ge=0.0)
    default_traffic_level: float = Field(default=0.2, ge=0.0, le=1.0)

    enforce_operating_bounds: bool = Field(
        default=True,
        description="Reject waypoints outside the operating region at the API layer.",
    )
    operating_bounds: Annotated[tuple[float, float, float, float], NoDecode] = Field(
        default=(75.78, 11.0, 76.12, 11.45),
        description="Operating region as (min_lon, min_lat, max_lon, max_lat).",
    )
    area_coverage: str = "Kottakkal urban area"

    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
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

    @field_validator("hospital_landmark", "operating_bounds", mode="before")
    @classmethod
    def _parse_float_tuple_from_env(cls, value: Any) -> Any:
        """Accept "lon,lat" style strings in addition to JSON arrays."""
        if not isinstance(value, str):
            return value
        if value.strip().startswith("["):
            return json.loads(value)
        return tuple(float(item.strip()) for item in value.split(",") if item.strip())

    @field_validator("operating_bounds")
    @classmethod
    def _check_bounds_order(cls, value: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        min_lon, min_lat, max_lon, max_lat = value
        if min_lon > max_lon or min_lat > max_lat:
            raise ValueError("operating_bounds must be (min_lon, min_lat, max_lon, max_lat)")
        return value


settings = Settings()
